"""CLI：构建命令（build / check / harvest）"""

from __future__ import annotations

import click

from archbuild.cli import _svc
from archbuild.core.exceptions import ArchBuildError


def register(group: click.Group) -> None:
    group.add_command(build)
    group.add_command(check)
    group.add_command(harvest)


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--packager", default=None, help="覆盖配置中的 PACKAGER 身份")
def build(names: tuple[str, ...], packager: str | None) -> None:
    """构建相对参考仓库已过期的包"""
    svc = _svc()
    if packager is not None:
        svc.config.packager = packager
    outcome = svc.orchestrator.run(list(names), svc.fetcher)
    if not outcome.success:
        raise click.ClickException(f"构建失败: {outcome.error}")

    report = outcome.report
    if report.nothing_to_build:
        click.echo("所有包均已是最新，无需构建。")
        return
    click.echo(f"已构建 {len(report.artifacts)} 个产物:")
    for a in report.artifacts:
        click.echo(f"  {a.package}")
        if a.signature is not None:
            click.echo(f"    签名: {a.signature}")


@click.command()
@click.argument("names", nargs=-1, required=True)
def check(names: tuple[str, ...]) -> None:
    """仅获取源码并判定过期，不升级系统也不构建"""
    svc = _svc()
    steps = svc.orchestrator.steps
    try:
        with svc.workspace.acquire():
            outdated = steps.resolve(steps.fetch_sources(list(names), svc.fetcher))
    except ArchBuildError as e:
        raise click.ClickException(f"判定失败: {e}") from e

    if not outdated:
        click.echo("所有包均已是最新。")
        return
    click.echo("需要构建:")
    for pkg in outdated:
        click.echo(f"  {pkg.display_name:30s} {pkg.version}")


@click.command()
@click.argument("pkg_dir", type=click.Path(exists=True, file_okay=False))
def harvest(pkg_dir: str) -> None:
    """列出目录中的构建产物及其签名"""
    try:
        artifacts = _svc().harvester.harvest(pkg_dir)
    except ArchBuildError as e:
        raise click.ClickException(str(e)) from e
    if not artifacts:
        click.echo("未找到构建产物。")
        return
    for a in artifacts:
        click.echo(f"  {a}")
