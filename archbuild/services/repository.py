"""本地参考仓库

读取 pacman 仓库数据库 (<repo>.db.tar.gz 等，由 repo-add 生成)，
作为过期判定的唯一依据。数据库中每个包对应一个 `<name>-<ver>-<rel>/desc`
成员，内容为 %KEY% 分段：

    %NAME%
    foo

    %VERSION%
    1:2.0-3

数据库不存在视为空仓库（首次发布），所有包均需构建。
"""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path

from archbuild.core.exceptions import RepositoryError
from archbuild.core.models import PackageSource
from archbuild.core.version import VersionDescriptor

logger = logging.getLogger(__name__)

DB_SUFFIXES = (".db.tar.gz", ".db.tar.xz", ".db.tar.zst", ".db.tar.bz2", ".db")


def parse_desc(text: str) -> dict[str, list[str]]:
    """解析 desc 文件为 {KEY: [行...]}"""
    sections: dict[str, list[str]] = {}
    current: list[str] | None = None
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("%") and line.endswith("%") and len(line) > 2:
            current = sections.setdefault(line[1:-1], [])
        elif not line:
            current = None
        elif current is not None:
            current.append(line)
    return sections


class LocalRepository:
    """基于 pacman 仓库数据库的 ReferenceRepository 实现"""

    def __init__(self, name: str, repo_dir: str | Path) -> None:
        self.name = name
        self.repo_dir = Path(repo_dir)
        self._holdings: dict[str, VersionDescriptor] | None = None

    @property
    def db_path(self) -> Path | None:
        """第一个存在的数据库文件路径"""
        for suffix in DB_SUFFIXES:
            p = self.repo_dir / f"{self.name}{suffix}"
            if p.exists():
                return p
        return None

    def holdings(self) -> dict[str, VersionDescriptor]:
        """仓库当前持有的 {包名: 版本}"""
        if self._holdings is None:
            self._holdings = self._load()
        return self._holdings

    def reload(self) -> None:
        self._holdings = None

    def _load(self) -> dict[str, VersionDescriptor]:
        db = self.db_path
        if db is None:
            logger.warning("仓库数据库不存在，视为空仓库: %s/%s", self.repo_dir, self.name)
            return {}

        held: dict[str, VersionDescriptor] = {}
        try:
            with tarfile.open(db, "r:*") as tar:
                for member in tar:
                    if not member.isfile() or not member.name.endswith("/desc"):
                        continue
                    f = tar.extractfile(member)
                    if f is None:
                        continue
                    desc = parse_desc(f.read().decode("utf-8"))
                    names, versions = desc.get("NAME"), desc.get("VERSION")
                    if not names or not versions:
                        logger.warning("desc 缺少 NAME/VERSION: %s", member.name)
                        continue
                    held[names[0]] = VersionDescriptor.parse(versions[0])
        except (tarfile.TarError, OSError, ValueError) as e:
            raise RepositoryError(f"读取仓库数据库失败 {db}: {e}") from e

        logger.info("仓库 %s 已加载: %d 个包", self.name, len(held))
        return held

    def is_updated(self, pkg: PackageSource) -> bool:
        """任一输出包不在仓库中，或源码版本更新，即需要构建"""
        held = self.holdings()
        for name in pkg.names:
            current = held.get(name)
            if current is None or pkg.version > current:
                return True
        return False

    def get_updated(self, pkgs: list[PackageSource]) -> list[PackageSource]:
        """返回需要构建的包，保持输入顺序"""
        return [p for p in pkgs if self.is_updated(p)]
