"""makepkg / pacman 构建工具

职责:
- 系统升级 (pacman -Syu)
- 源码准备 (makepkg --nobuild) + 重新生成 .SRCINFO
- 构建并安装 (makepkg --install --syncdeps)

所有命令通过 CommandExecutor 执行，阻塞直到完成，无超时。
"""

from __future__ import annotations

import logging
from pathlib import Path

from archbuild.core.srcinfo import SRCINFO_FILE
from archbuild.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

REFRESH_CMD = ["sudo", "pacman", "--sync", "--refresh", "--sysupgrade", "--noconfirm"]
PREPARE_CMD = ["makepkg", "--nobuild", "--nodeps", "--noconfirm"]
PRINTSRCINFO_CMD = ["makepkg", "--printsrcinfo"]
BUILD_CMD = ["makepkg", "--install", "--syncdeps", "--noconfirm"]


class MakepkgTool:
    """基于子进程的 BuildTool 实现"""

    def __init__(self, workdir: str | Path = ".", executor: CommandExecutor | None = None) -> None:
        self.workdir = Path(workdir)
        self._executor = executor

    def refresh_environment(self) -> None:
        logger.info("正在升级系统包")
        run_cmd(
            REFRESH_CMD, cwd=str(self.workdir), capture=False,
            label="sysupgrade", executor=self._executor,
        )

    def prepare_source(self, path: Path) -> None:
        run_cmd(PREPARE_CMD, cwd=str(path), capture=False, label="prepare", executor=self._executor)
        r = run_cmd(PRINTSRCINFO_CMD, cwd=str(path), label="srcinfo", executor=self._executor)
        (Path(path) / SRCINFO_FILE).write_text(r.stdout, encoding="utf-8")

    def build_and_install(self, path: Path, env: dict[str, str] | None = None) -> None:
        run_cmd(
            BUILD_CMD, cwd=str(path), env=env, capture=False,
            label="makepkg", executor=self._executor,
        )
