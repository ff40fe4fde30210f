"""核心数据模型

构建流程中流转的数据类集中定义于此：
  - PackageSource: 一个已检出的包源码目录及其元数据
  - BuildArtifact: 构建产物（包文件 + 可选签名）
  - BuildReport / BuildOutcome: 一次构建运行的结果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from archbuild.core.version import VersionDescriptor

# live-source 包的名称后缀（跟踪上游版本库分支，版本只能在拉取源码后确定）
VCS_SUFFIXES = ("-git", "-svn", "-hg", "-bzr", "-darcs", "-cvs", "-fossil")

SIGNATURE_SUFFIX = ".sig"
PACKAGE_SUFFIXES = (".pkg.tar.xz", ".pkg.tar.zst")


def is_live_source(*names: str) -> bool:
    """任一名称带 VCS 后缀即视为 live-source 包"""
    return any(n.endswith(VCS_SUFFIXES) for n in names)


# =========================================================================
# 包源码
# =========================================================================


@dataclass
class PackageSource:
    """包源码目录

    由 SourceFetcher 创建；VersionProbe 刷新 live-source 包时原地更新
    version / names。目录本身归调用方所有。
    """

    path: Path
    base: str
    names: list[str] = field(default_factory=list)
    version: VersionDescriptor = field(default_factory=lambda: VersionDescriptor("0"))
    live: bool = False
    depends: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if not self.names:
            self.names = [self.base]

    @property
    def display_name(self) -> str:
        """日志展示名：拆分包显示为 base:(name1, name2)"""
        if len(self.names) > 1 or self.names[0] != self.base:
            return f"{self.base}:({', '.join(self.names)})"
        return self.base


# =========================================================================
# 构建产物
# =========================================================================


@dataclass
class BuildArtifact:
    """构建产物：包文件及其可选的分离签名"""

    package: Path
    signature: Path | None = None

    def __str__(self) -> str:
        if self.signature is not None:
            return f"{self.package.name} ({self.signature.name})"
        return self.package.name


@dataclass
class BuildReport:
    """一次构建运行的产物清单（按包处理顺序）

    nothing_to_build=True 表示所有包均已是最新，属于成功结果。
    """

    artifacts: list[BuildArtifact] = field(default_factory=list)
    nothing_to_build: bool = False

    def summary(self) -> str:
        """生成「已构建包」摘要文本"""
        if self.nothing_to_build:
            return "所有包均已是最新，无需构建"
        lines = ["已构建的包:"]
        lines.extend(f" * {a}" for a in self.artifacts)
        return "\n".join(lines)


@dataclass
class BuildOutcome:
    """构建运行结果：要么完整报告，要么错误，从不返回部分报告"""

    report: BuildReport | None = None
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.report is not None


class RunState(str, Enum):
    """构建编排状态机"""
    INIT = "init"
    ENVIRONMENT_REFRESHED = "environment_refreshed"
    SOURCES_FETCHED = "sources_fetched"
    STALENESS_RESOLVED = "staleness_resolved"
    BUILDING = "building"
    HARVESTED = "harvested"
    REPORTED = "reported"
    FAILED = "failed"
