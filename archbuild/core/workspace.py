"""构建工作区独占

源码目录树与系统包数据库是全局可变状态，同一时刻只允许一次构建运行。
BuildWorkspace 作为单一所有者令牌传给编排器，进入运行时独占获取：
  - 进程内: 非阻塞 threading.Lock
  - 跨进程: 工作目录下锁文件上的 fcntl.flock(LOCK_EX | LOCK_NB)

flock 随持有进程退出（含被杀死）由内核释放，残留的锁文件不会阻塞后续运行。
锁文件本身保留在磁盘上，内容为最近一次持有者的 PID，仅用于排查。
"""

from __future__ import annotations

import fcntl
import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from archbuild.core.exceptions import RunInProgressError

logger = logging.getLogger(__name__)

LOCK_FILE = ".archbuild.lock"


class BuildWorkspace:
    """构建工作区令牌"""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self._lock = threading.Lock()

    @property
    def lock_path(self) -> Path:
        return self.root / LOCK_FILE

    @property
    def busy(self) -> bool:
        if self._lock.locked():
            return True
        try:
            fd = os.open(self.lock_path, os.O_RDONLY)
        except FileNotFoundError:
            return False
        try:
            fcntl.flock(fd, fcntl.LOCK_SH | fcntl.LOCK_NB)
        except BlockingIOError:
            return True
        finally:
            os.close(fd)
        return False

    def _holder(self) -> str:
        try:
            return self.lock_path.read_text(encoding="utf-8").strip() or "?"
        except OSError:
            return "?"

    @contextmanager
    def acquire(self) -> Iterator[BuildWorkspace]:
        """独占工作区，退出时（含异常）释放

        异常:
            RunInProgressError: 工作区已被占用
        """
        if not self._lock.acquire(blocking=False):
            raise RunInProgressError(f"工作区正在构建中: {self.root}")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.lock_path, os.O_CREAT | os.O_RDWR, 0o644)
            try:
                try:
                    fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                except BlockingIOError as e:
                    raise RunInProgressError(
                        f"工作区已被其他进程占用 (pid={self._holder()}): {self.lock_path}",
                    ) from e
                os.ftruncate(fd, 0)
                os.write(fd, str(os.getpid()).encode())
                logger.debug("工作区已锁定: %s", self.root)
                try:
                    yield self
                finally:
                    fcntl.flock(fd, fcntl.LOCK_UN)
                    logger.debug("工作区已释放: %s", self.root)
            finally:
                os.close(fd)
        finally:
            self._lock.release()
