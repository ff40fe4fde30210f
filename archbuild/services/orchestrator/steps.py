"""编排器步骤实现

步骤顺序：
1. refresh_environment - 升级构建主机
2. fetch_sources - 获取源码及构建依赖
3. resolve - 过期判定
4. build - 逐包构建并安装
5. harvest - 收集该包产物

每个步骤把底层失败转换为对应阶段的类型化异常，并附带包标识。
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archbuild.core.protocols import BuildTool, ReferenceRepository, SourceFetcher
    from archbuild.services.build import ArtifactHarvester, StalenessResolver

from archbuild.core.exceptions import (
    BuildError,
    EnvironmentRefreshError,
    ExecutionError,
    FetchError,
    MetadataError,
)
from archbuild.core.models import BuildArtifact, PackageSource

logger = logging.getLogger(__name__)


class BuildSteps:
    """编排步骤集合"""

    def __init__(
        self,
        tool: BuildTool,
        repository: ReferenceRepository,
        resolver: StalenessResolver,
        harvester: ArtifactHarvester,
        packager: str = "",
    ) -> None:
        self.tool = tool
        self.repository = repository
        self.resolver = resolver
        self.harvester = harvester
        self.packager = packager

    def refresh_environment(self) -> None:
        """步骤1: 升级构建主机的系统包"""
        try:
            self.tool.refresh_environment()
        except (ExecutionError, OSError) as e:
            raise EnvironmentRefreshError(f"系统升级失败: {e}") from e
        logger.info("[Step 1] 构建环境已更新")

    def fetch_sources(self, names: list[str], fetcher: SourceFetcher) -> list[PackageSource]:
        """步骤2: 获取请求包及其传递性构建依赖的源码"""
        logger.info("获取构建源码及依赖: %s", ", ".join(names))
        try:
            sources = fetcher.get(names)
        except FetchError:
            raise
        except (ExecutionError, MetadataError, OSError) as e:
            raise FetchError(f"获取源码失败: {e}") from e
        logger.info("[Step 2] 源码就绪: %d 个包", len(sources))
        return sources

    def resolve(self, sources: list[PackageSource]) -> list[PackageSource]:
        """步骤3: 刷新 live-source 版本并与参考仓库比较"""
        outdated = self.resolver.resolve(sources, self.repository)
        logger.info(
            "[Step 3] 待构建: %s",
            ", ".join(p.base for p in outdated) or "(无)",
        )
        return outdated

    def build_env(self) -> dict[str, str] | None:
        """构建子进程环境：配置了 packager 时注入 PACKAGER"""
        if not self.packager:
            return None
        return {**os.environ, "PACKAGER": self.packager}

    def build(self, pkg: PackageSource) -> None:
        """步骤4: 构建并安装单个包"""
        logger.info("构建包 %s", pkg.display_name)
        try:
            self.tool.build_and_install(pkg.path, self.build_env())
        except (ExecutionError, OSError) as e:
            raise BuildError(f"构建失败: {e}", package=pkg.base) from e

    def harvest(self, pkg: PackageSource) -> list[BuildArtifact]:
        """步骤5: 紧接该包构建之后收集其产物"""
        artifacts = self.harvester.harvest(pkg.path)
        logger.info("%s 产物: %d 个", pkg.base, len(artifacts))
        return artifacts
