"""领域协议定义

集中定义构建核心与外部协作者之间的接口契约（Protocol），
实现依赖倒置：编排器依赖抽象而非具体实现。
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from archbuild.core.models import PackageSource


# =========================================================================
# 源码获取协议
# =========================================================================

class SourceFetcher(Protocol):
    """包源码获取者协议

    将请求的包名（及其传递性构建依赖）物化为本地源码目录，
    并附带已解析的构建元数据。
    """

    def get(self, names: list[str]) -> list[PackageSource]:
        """获取包源码，依赖在前"""
        ...


# =========================================================================
# 参考仓库协议
# =========================================================================

class ReferenceRepository(Protocol):
    """参考仓库协议：过期判定的唯一依据

    返回比仓库现有版本更新（或仓库中不存在）的子集，保持输入顺序。
    """

    def get_updated(self, pkgs: list[PackageSource]) -> list[PackageSource]:
        """返回需要重新构建的包"""
        ...


# =========================================================================
# 构建工具协议
# =========================================================================

class BuildTool(Protocol):
    """构建工具能力接口

    仅包含核心实际用到的三个操作。真实实现调用 pacman / makepkg 子进程，
    测试实现只记录调用，无需启动外部进程。
    """

    def refresh_environment(self) -> None:
        """升级构建主机的系统包"""
        ...

    def prepare_source(self, path: Path) -> None:
        """拉取并准备源码（不编译、不装依赖），随后重新生成 .SRCINFO"""
        ...

    def build_and_install(self, path: Path, env: dict[str, str] | None = None) -> None:
        """编译并安装包，自动安装缺失依赖，从不交互"""
        ...
