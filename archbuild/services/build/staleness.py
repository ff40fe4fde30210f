"""过期判定

先刷新所有 live-source 包的版本，再整体交给参考仓库比较。
任一 live-source 包刷新失败即中止整批判定，不返回部分结果。
"""

from __future__ import annotations

import logging

from archbuild.core.models import PackageSource
from archbuild.core.protocols import ReferenceRepository
from archbuild.services.build.probe import VersionProbe

logger = logging.getLogger(__name__)


class StalenessResolver:
    """将包划分为「需要构建」与「已是最新」"""

    def __init__(self, probe: VersionProbe) -> None:
        self.probe = probe

    def resolve(
        self, pkgs: list[PackageSource], repo: ReferenceRepository,
    ) -> list[PackageSource]:
        """返回需要构建的包，顺序与参考仓库报告一致

        刷新之后一律以参考仓库的比较结果为准，live-source 包不会被无条件重建。
        """
        if not pkgs:
            return []

        live = [p for p in pkgs if p.live]
        for pkg in live:
            self.probe.refresh(pkg)

        outdated = repo.get_updated(pkgs)
        logger.info(
            "过期判定完成: %d/%d 需要构建 (live-source %d)",
            len(outdated), len(pkgs), len(live),
        )
        return list(outdated)
