"""构建元数据 (.SRCINFO) 解析

.SRCINFO 由 `makepkg --printsrcinfo` 生成，格式为逐行 `key = value`：

    pkgbase = foo
    	pkgver = 1.0
    	pkgrel = 1
    	epoch = 2
    	makedepends = bar>=1.2

    pkgname = foo
    pkgname = foo-docs

第一个 pkgname 之前为全局段；之后的段落只用于收集输出包名。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from archbuild.core.exceptions import MetadataError
from archbuild.core.models import PackageSource, is_live_source
from archbuild.core.version import VersionDescriptor

logger = logging.getLogger(__name__)

SRCINFO_FILE = ".SRCINFO"

_DEP_NAME_RE = re.compile(r"^([^<>=:]+)")
_DEP_KEYS = ("depends", "makedepends", "checkdepends")


def dependency_name(dep: str) -> str:
    """去掉依赖声明中的版本约束和描述，如 'foo>=1.0' → 'foo'"""
    m = _DEP_NAME_RE.match(dep.strip())
    return m.group(1).strip() if m else dep.strip()


@dataclass
class SrcInfo:
    """.SRCINFO 解析结果"""

    pkgbase: str
    pkgnames: list[str]
    version: VersionDescriptor
    depends: list[str] = field(default_factory=list)


def parse_srcinfo_text(text: str, source: str = "") -> SrcInfo:
    """解析 .SRCINFO 文本内容

    参数:
        text: 文件内容
        source: 来源描述，仅用于错误信息

    异常:
        MetadataError: 缺少 pkgbase / pkgname / pkgver / pkgrel，或 epoch 非整数
    """
    fields: dict[str, str] = {}
    pkgnames: list[str] = []
    depends: list[str] = []
    in_global = True

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key == "pkgname":
            pkgnames.append(value)
            in_global = False
            continue
        if not in_global:
            continue
        if key in _DEP_KEYS:
            name = dependency_name(value)
            if name and name not in depends:
                depends.append(name)
        else:
            fields.setdefault(key, value)

    missing = [k for k in ("pkgbase", "pkgver", "pkgrel") if not fields.get(k)]
    if not pkgnames:
        missing.append("pkgname")
    if missing:
        raise MetadataError(f"{source or SRCINFO_FILE} 缺少字段: {', '.join(missing)}")

    epoch_text = fields.get("epoch")
    if epoch_text is not None and not epoch_text.isdigit():
        raise MetadataError(f"{source or SRCINFO_FILE} epoch 非法: {epoch_text}")

    return SrcInfo(
        pkgbase=fields["pkgbase"],
        pkgnames=pkgnames,
        version=VersionDescriptor(
            version=fields["pkgver"],
            release=fields["pkgrel"],
            epoch=int(epoch_text) if epoch_text is not None else None,
        ),
        depends=depends,
    )


def parse_srcinfo(path: str | Path) -> SrcInfo:
    """读取并解析 .SRCINFO 文件；path 可为文件或其所在目录"""
    p = Path(path)
    if p.is_dir():
        p = p / SRCINFO_FILE
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MetadataError(f"读取 {p} 失败: {e}") from e
    return parse_srcinfo_text(text, source=str(p))


def load_package_source(pkg_dir: str | Path) -> PackageSource:
    """从包目录的 .SRCINFO 构造 PackageSource"""
    info = parse_srcinfo(pkg_dir)
    logger.debug("已解析 %s: %s %s", pkg_dir, info.pkgbase, info.version)
    return PackageSource(
        path=Path(pkg_dir),
        base=info.pkgbase,
        names=list(info.pkgnames),
        version=info.version,
        live=is_live_source(info.pkgbase, *info.pkgnames),
        depends=info.depends,
    )
