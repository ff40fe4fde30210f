"""CLI：杂项命令（配置）"""

from __future__ import annotations

from pathlib import Path

import click

from archbuild.cli import _svc
from archbuild.utils.yaml_io import save_yaml


def register(group: click.Group) -> None:
    group.add_command(init_config_cmd)
    group.add_command(show_config)


@click.command(name="init-config")
@click.argument("path", default="configs/archbuild.yml")
@click.option("--force", is_flag=True, help="覆盖已存在的文件")
def init_config_cmd(path: str, force: bool) -> None:
    """写出默认配置文件"""
    from archbuild.core.config import Config
    if Path(path).exists() and not force:
        raise click.ClickException(f"配置文件已存在: {path}（使用 --force 覆盖）")
    data = Config().to_dict()
    data.pop("extra", None)
    save_yaml(path, data)
    click.echo(f"配置已写入: {path}")


@click.command(name="config")
def show_config() -> None:
    """显示当前生效配置"""
    for key, value in _svc().config.to_dict().items():
        click.echo(f"  {key:18s} {value}")
