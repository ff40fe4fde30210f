"""archbuild 日志配置

日志统一输出到 stderr，stdout 只留给命令结果。
ARCHBUILD_LOG_JSON=1 时每行一条 JSON，供 CI 流水线解析；
若记录携带 ArchBuildError 异常，附加其错误码与包名。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from archbuild.core.exceptions import ArchBuildError

TEXT_FORMAT = "%(asctime)s %(levelname).1s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        exc = record.exc_info[1] if record.exc_info else None
        if isinstance(exc, ArchBuildError):
            entry["code"] = exc.code
            package = getattr(exc, "package", "")
            if package:
                entry["package"] = package
        if exc is not None:
            entry["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器，可重复调用（CLI 每次调用都会重新配置）"""
    reset_logging()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
