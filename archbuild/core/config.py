"""集中配置管理

提供统一的配置入口，支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import yaml

from archbuild.core.exceptions import ConfigError
from archbuild.core.models import PACKAGE_SUFFIXES
from archbuild.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

SOURCE_MODES = ("aur", "local")


@dataclass
class Config:
    """全局配置"""

    # 目录
    workdir: str = "data/sources"      # 构建工作区（AUR 克隆目录 + 锁文件）
    source_dir: str = "pkgbuilds"      # local 模式下的 PKGBUILD 目录树

    # 源码来源
    source_mode: str = "aur"           # aur | local
    aur_url: str = "https://aur.archlinux.org"

    # 参考仓库
    repo_name: str = "repo"
    repo_dir: str = "data/repo"

    # 构建
    packager: str = ""                 # 注入 PACKAGER 环境变量，空则不注入
    package_suffixes: list[str] = field(default_factory=lambda: list(PACKAGE_SUFFIXES))

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.source_mode not in SOURCE_MODES:
            raise ConfigError(
                f"未知 source_mode: {self.source_mode}，可选: {', '.join(SOURCE_MODES)}"
            )

    @classmethod
    def from_file(cls, path: str = "configs/archbuild.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"读取配置文件失败 {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        from dataclasses import asdict
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/archbuild.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
