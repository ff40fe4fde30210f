"""服务容器：统一依赖注入

CLI 通过容器获取构建工具、参考仓库、源码来源和编排器，而非直接构造。
同一容器内的实例共享状态（工作区锁、仓库数据库缓存等）。

依赖关系图（→ 表示依赖）:
  orchestrator → tool, repository, workspace
  fetcher      → executor
  tool         → executor

用法:
    container = ServiceContainer(config=Config.from_file("archbuild.yml"))
    report = container.orchestrator.build_new(["foo"], container.fetcher)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archbuild.core.config import Config
    from archbuild.core.protocols import SourceFetcher
    from archbuild.core.workspace import BuildWorkspace
    from archbuild.services.build import ArtifactHarvester, MakepkgTool
    from archbuild.services.orchestrator import BuildOrchestrator
    from archbuild.services.repository import LocalRepository
    from archbuild.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self, config: Config | None = None, executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from archbuild.core.config import get_config
            config = get_config()
        self._config = config
        self._executor = executor

    @property
    def config(self) -> Config:
        return self._config

    @property
    def executor(self) -> CommandExecutor:
        if self._executor is None:
            from archbuild.utils.shell import get_executor
            self._executor = get_executor()
        return self._executor

    @property
    def workspace(self) -> BuildWorkspace:
        if "workspace" not in self._instances:
            from archbuild.core.workspace import BuildWorkspace
            self._instances["workspace"] = BuildWorkspace(self._config.workdir)
        return self._instances["workspace"]  # type: ignore[return-value]

    @property
    def tool(self) -> MakepkgTool:
        if "tool" not in self._instances:
            from archbuild.services.build import MakepkgTool
            self._instances["tool"] = MakepkgTool(
                workdir=self._config.workdir, executor=self.executor,
            )
        return self._instances["tool"]  # type: ignore[return-value]

    @property
    def harvester(self) -> ArtifactHarvester:
        if "harvester" not in self._instances:
            from archbuild.services.build import ArtifactHarvester
            self._instances["harvester"] = ArtifactHarvester(
                package_suffixes=tuple(self._config.package_suffixes),
            )
        return self._instances["harvester"]  # type: ignore[return-value]

    @property
    def repository(self) -> LocalRepository:
        if "repository" not in self._instances:
            from archbuild.services.repository import LocalRepository
            self._instances["repository"] = LocalRepository(
                name=self._config.repo_name, repo_dir=self._config.repo_dir,
            )
        return self._instances["repository"]  # type: ignore[return-value]

    @property
    def fetcher(self) -> SourceFetcher:
        if "fetcher" not in self._instances:
            if self._config.source_mode == "local":
                from archbuild.services.sources import LocalSourceFetcher
                self._instances["fetcher"] = LocalSourceFetcher(self._config.source_dir)
            else:
                from archbuild.services.sources import AurSourceFetcher
                self._instances["fetcher"] = AurSourceFetcher(
                    workdir=self._config.workdir,
                    aur_url=self._config.aur_url,
                    executor=self.executor,
                )
        return self._instances["fetcher"]  # type: ignore[return-value]

    @property
    def orchestrator(self) -> BuildOrchestrator:
        if "orchestrator" not in self._instances:
            from archbuild.services.orchestrator import BuildOrchestrator
            self._instances["orchestrator"] = BuildOrchestrator(
                tool=self.tool,
                repository=self.repository,
                workspace=self.workspace,
                packager=self._config.packager,
                harvester=self.harvester,
            )
        return self._instances["orchestrator"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
