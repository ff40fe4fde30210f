"""构建编排器 - 协调线性状态机

Init → EnvironmentRefreshed → SourcesFetched → StalenessResolved
     → [Building → Harvested]* → Reported

快速失败、至多一次：任一步骤失败立即中止，已构建的包不回滚，
也不出现在返回结果中。整个运行在工作区独占锁内完成。
"""

from __future__ import annotations

import logging

from archbuild.core.exceptions import ArchBuildError
from archbuild.core.models import BuildArtifact, BuildOutcome, BuildReport, RunState
from archbuild.core.protocols import BuildTool, ReferenceRepository, SourceFetcher
from archbuild.core.workspace import BuildWorkspace
from archbuild.services.build import ArtifactHarvester, StalenessResolver, VersionProbe
from archbuild.services.orchestrator.steps import BuildSteps

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """端到端构建编排（严格串行）"""

    def __init__(
        self,
        tool: BuildTool,
        repository: ReferenceRepository,
        workspace: BuildWorkspace,
        *,
        packager: str = "",
        harvester: ArtifactHarvester | None = None,
        resolver: StalenessResolver | None = None,
    ) -> None:
        self.workspace = workspace
        self.steps = BuildSteps(
            tool=tool,
            repository=repository,
            resolver=resolver or StalenessResolver(VersionProbe(tool)),
            harvester=harvester or ArtifactHarvester(),
            packager=packager,
        )
        self.state = RunState.INIT

    def build_new(self, requested: list[str], fetcher: SourceFetcher) -> BuildReport:
        """构建请求包中相对参考仓库已过期的部分

        返回:
            BuildReport: 全部成功时的完整报告；无需构建时 nothing_to_build=True

        异常:
            ArchBuildError 子类: 任一阶段失败，不返回部分报告
        """
        with self.workspace.acquire():
            self.state = RunState.INIT
            try:
                return self._run(requested, fetcher)
            except ArchBuildError:
                self.state = RunState.FAILED
                raise

    def run(self, requested: list[str], fetcher: SourceFetcher) -> BuildOutcome:
        """build_new 的结果封装版本：失败时返回携带错误的 BuildOutcome"""
        try:
            return BuildOutcome(report=self.build_new(requested, fetcher))
        except ArchBuildError as e:
            logger.error("构建运行失败 [%s]: %s", e.code, e)
            return BuildOutcome(error=e)

    def _run(self, requested: list[str], fetcher: SourceFetcher) -> BuildReport:
        self.steps.refresh_environment()
        self.state = RunState.ENVIRONMENT_REFRESHED

        sources = self.steps.fetch_sources(requested, fetcher)
        self.state = RunState.SOURCES_FETCHED

        outdated = self.steps.resolve(sources)
        self.state = RunState.STALENESS_RESOLVED

        if not outdated:
            report = BuildReport(nothing_to_build=True)
            self.state = RunState.REPORTED
            logger.info(report.summary())
            return report

        artifacts: list[BuildArtifact] = []
        for pkg in outdated:
            self.state = RunState.BUILDING
            self.steps.build(pkg)
            artifacts.extend(self.steps.harvest(pkg))
            self.state = RunState.HARVESTED

        report = BuildReport(artifacts=artifacts)
        self.state = RunState.REPORTED
        logger.info(report.summary())
        return report
