"""本地源码目录来源

根目录下每个含 .SRCINFO 的子目录即一个包源码。
请求名可匹配 pkgbase 或任一 pkgname；结果按请求顺序、按 pkgbase 去重。
"""

from __future__ import annotations

import logging
from pathlib import Path

from archbuild.core.exceptions import FetchError, MetadataError
from archbuild.core.models import PackageSource
from archbuild.core.srcinfo import SRCINFO_FILE, load_package_source

logger = logging.getLogger(__name__)


class LocalSourceFetcher:
    """从本地 PKGBUILD 目录树获取包源码"""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def scan(self) -> list[PackageSource]:
        """扫描根目录下全部包源码（按目录名排序）"""
        if not self.root.is_dir():
            raise FetchError(f"源码目录不存在: {self.root}")
        sources: list[PackageSource] = []
        for d in sorted(self.root.iterdir()):
            if not (d / SRCINFO_FILE).is_file():
                continue
            try:
                sources.append(load_package_source(d))
            except MetadataError as e:
                raise FetchError(str(e), package=d.name) from e
        return sources

    def get(self, names: list[str]) -> list[PackageSource]:
        index: dict[str, PackageSource] = {}
        for src in self.scan():
            index.setdefault(src.base, src)
            for n in src.names:
                index.setdefault(n, src)

        result: list[PackageSource] = []
        seen: set[str] = set()
        for name in names:
            src = index.get(name)
            if src is None:
                raise FetchError("本地源码目录中找不到该包", package=name)
            if src.base in seen:
                continue
            seen.add(src.base)
            result.append(src)
        logger.info("本地源码就绪: %s", ", ".join(s.base for s in result))
        return result
