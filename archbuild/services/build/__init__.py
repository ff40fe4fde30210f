"""构建核心模块

拆分说明:
- tool.py: makepkg / pacman 子进程调用
- probe.py: live-source 包版本刷新
- staleness.py: 过期判定
- harvester.py: 构建产物收集
"""

from archbuild.services.build.harvester import ArtifactHarvester
from archbuild.services.build.probe import VersionProbe
from archbuild.services.build.staleness import StalenessResolver
from archbuild.services.build.tool import MakepkgTool

__all__ = ["ArtifactHarvester", "MakepkgTool", "StalenessResolver", "VersionProbe"]
