"""构建编排器模块

拆分说明：
- steps.py: 5 个步骤实现
- orchestrator.py: 状态机协调器
"""

from archbuild.services.orchestrator.orchestrator import BuildOrchestrator
from archbuild.services.orchestrator.steps import BuildSteps

__all__ = ["BuildOrchestrator", "BuildSteps"]
