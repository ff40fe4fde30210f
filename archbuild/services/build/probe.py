"""live-source 包版本探测

live-source 包（-git/-svn 等）跟踪上游分支，静态版本无意义。
只有拉取最新上游源码并重新生成 .SRCINFO 后才能得知真实版本。
刷新会修改磁盘上的源码目录。
"""

from __future__ import annotations

import logging

from archbuild.core.exceptions import ExecutionError, MetadataError, VersionRefreshError
from archbuild.core.models import PackageSource
from archbuild.core.protocols import BuildTool
from archbuild.core.srcinfo import parse_srcinfo

logger = logging.getLogger(__name__)


class VersionProbe:
    """刷新 live-source 包的版本描述"""

    def __init__(self, tool: BuildTool) -> None:
        self.tool = tool

    def refresh(self, pkg: PackageSource) -> PackageSource:
        """准备源码并重新解析 .SRCINFO，原地更新 pkg.version

        非 live-source 包直接原样返回。

        异常:
            VersionRefreshError: 源码准备或元数据解析失败
        """
        if not pkg.live:
            return pkg

        logger.info("检查 %s 的新版本", pkg.display_name)
        try:
            self.tool.prepare_source(pkg.path)
            info = parse_srcinfo(pkg.path)
        except (ExecutionError, MetadataError, OSError) as e:
            raise VersionRefreshError(f"刷新版本失败: {e}", package=pkg.base) from e

        if info.version != pkg.version:
            logger.info("%s 版本更新: %s -> %s", pkg.base, pkg.version, info.version)
        pkg.version = info.version
        pkg.names = list(info.pkgnames)
        return pkg
