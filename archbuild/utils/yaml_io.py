"""配置文件 YAML 读写"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

# 配置文件不应超过 256KB
MAX_CONFIG_SIZE = 256 * 1024


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取顶层为映射的 YAML 文件；文件不存在或为空返回 {}

    异常:
        yaml.YAMLError: 格式错误
        ValueError: 文件过大或顶层不是映射
        OSError: 读取失败
    """
    p = Path(path)
    if not p.is_file():
        return {}
    if p.stat().st_size > MAX_CONFIG_SIZE:
        raise ValueError(f"文件超过 {MAX_CONFIG_SIZE} 字节")
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"顶层应为映射，实际为 {type(data).__name__}")
    return data


def save_yaml(path: str | Path, data: dict[str, Any]) -> None:
    """原子写出 YAML，保持键顺序"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)
    fd, tmp = tempfile.mkstemp(dir=p.parent, prefix=f".{p.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, p)
    except OSError:
        Path(tmp).unlink(missing_ok=True)
        raise
