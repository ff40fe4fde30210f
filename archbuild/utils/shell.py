"""外部命令执行

pacman / makepkg / git 全部经由 CommandExecutor 调用，测试时整体替换。
调用阻塞直到子进程退出，不设超时：一次构建可能持续数小时。

capture=False 时子进程直接继承终端输出（构建日志实时可见），
结果中 stdout / stderr 为空。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from archbuild.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)

# 失败信息中保留的 stderr 末尾长度
STDERR_TAIL = 500


@dataclass
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """命令执行器协议"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        capture: bool = True,
    ) -> CommandResult:
        ...


class LocalExecutor:
    """在本机以子进程执行命令"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        capture: bool = True,
    ) -> CommandResult:
        try:
            r = subprocess.run(
                cmd, cwd=cwd, env=env, check=False,
                capture_output=capture, text=True, errors="replace",
            )
        except FileNotFoundError as e:
            # 命令不存在与非零退出同等对待
            return CommandResult(127, "", str(e))
        return CommandResult(r.returncode, r.stdout or "", r.stderr or "")


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局执行器（CLI 端到端测试用）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


def run_cmd(
    cmd: list[str], *, cwd: str = ".",
    env: dict[str, str] | None = None,
    capture: bool = True,
    label: str = "cmd",
    executor: CommandExecutor | None = None,
) -> CommandResult:
    """执行命令，非零退出抛 ExecutionError

    Args:
        cmd: 参数列表
        cwd: 工作目录（通常为包源码目录）
        env: 完整环境变量，None 表示继承当前进程
        capture: 是否捕获输出；构建类命令传 False 让日志直达终端
        label: 日志与错误信息中的步骤名
        executor: 不传则使用全局执行器
    """
    logger.info("  %s: %s (cwd=%s)", label, shlex.join(cmd), cwd)
    r = (executor or get_executor()).execute(cmd, cwd=cwd, env=env, capture=capture)
    if not r.success:
        detail = r.stderr.strip()[-STDERR_TAIL:]
        msg = f"{label}失败 (rc={r.returncode})"
        raise ExecutionError(f"{msg}: {detail}" if detail else msg)
    return r
