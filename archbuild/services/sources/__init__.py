"""包源码来源模块

拆分说明:
- local.py: 本地 PKGBUILD 目录树
- aur.py: AUR (RPC 查询 + git 克隆)
"""

from archbuild.services.sources.aur import AurSourceFetcher
from archbuild.services.sources.local import LocalSourceFetcher

__all__ = ["AurSourceFetcher", "LocalSourceFetcher"]
