"""archbuild 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os
from typing import Any

import click

from archbuild import __version__
from archbuild.core.config import init_config
from archbuild.core.exceptions import ConfigError
from archbuild.services.container import get_container, reset_container
from archbuild.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", default="configs/archbuild.yml", help="配置文件路径")
def main(config: str) -> None:
    """archbuild - AUR 包增量构建工具"""
    setup_logging(
        level=os.getenv("ARCHBUILD_LOG_LEVEL", "INFO"),
        json_output=os.getenv("ARCHBUILD_LOG_JSON", "") == "1",
    )
    try:
        init_config(config)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    reset_container()


# 注册各领域子命令
from archbuild.cli.cmd_build import register as _reg_build  # noqa: E402
from archbuild.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_build(main)
_reg_misc(main)
