"""统一异常体系

所有业务异常继承 ArchBuildError。每个异常对应构建流程中的一个失败阶段，
CLI 层据此输出友好提示，调用方据 code 区分失败类型。

没有任何内部重试：异常原样向上传播，由调用方决定是否重跑。
"""

from __future__ import annotations


class ArchBuildError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PackageError(ArchBuildError):
    """与具体包相关的异常，携带包标识便于日志定位"""

    def __init__(self, message: str, package: str = "") -> None:
        super().__init__(f"{package}: {message}" if package else message)
        self.package = package


class ConfigError(ArchBuildError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ExecutionError(ArchBuildError):
    """外部命令返回非零退出码"""

    code = "EXECUTION_ERROR"


class MetadataError(PackageError):
    """构建元数据 (.SRCINFO) 缺失或无法解析"""

    code = "METADATA_ERROR"


class EnvironmentRefreshError(ArchBuildError):
    """系统升级失败，整个构建中止"""

    code = "ENVIRONMENT_ERROR"


class FetchError(PackageError):
    """无法获取请求的包源码或其依赖"""

    code = "FETCH_ERROR"


class VersionRefreshError(PackageError):
    """live-source 包刷新版本失败，整批过期判定中止"""

    code = "VERSION_REFRESH_ERROR"


class RepositoryError(ArchBuildError):
    """参考仓库数据库读取失败"""

    code = "REPOSITORY_ERROR"


class BuildError(PackageError):
    """makepkg 构建失败"""

    code = "BUILD_ERROR"


class HarvestError(PackageError):
    """构建完成后无法扫描产物目录"""

    code = "HARVEST_ERROR"


class RunInProgressError(ArchBuildError):
    """同一工作目录已有构建在运行"""

    code = "RUN_IN_PROGRESS"
