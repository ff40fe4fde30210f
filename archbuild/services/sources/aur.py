"""AUR 源码来源

职责:
- 通过 AUR RPC (/rpc/v5/info) 查询包名对应的 pkgbase
- git clone / git pull 包构建描述
- 解析 .SRCINFO，递归获取 AUR 中存在的构建依赖

结果按「依赖在前」排列并按 pkgbase 去重；官方仓库依赖交由
makepkg --syncdeps 安装，不在此处理。
"""

from __future__ import annotations

import json
import logging
import urllib.request
from pathlib import Path
from typing import Any
from urllib.parse import urlencode, urlparse

from archbuild.core.exceptions import ConfigError, ExecutionError, FetchError, MetadataError
from archbuild.core.models import PackageSource
from archbuild.core.srcinfo import load_package_source
from archbuild.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

DEFAULT_AUR_URL = "https://aur.archlinux.org"


class AurSourceFetcher:
    """从 AUR 获取包源码及其 AUR 构建依赖"""

    def __init__(
        self,
        workdir: str | Path,
        aur_url: str = DEFAULT_AUR_URL,
        executor: CommandExecutor | None = None,
        timeout: int = 30,
    ) -> None:
        if urlparse(aur_url).scheme not in ("http", "https"):
            raise ConfigError(f"aur_url 仅支持 http/https: {aur_url}")
        self.workdir = Path(workdir)
        self.aur_url = aur_url.rstrip("/")
        self.timeout = timeout
        self._executor = executor

    def info(self, names: list[str]) -> dict[str, dict[str, Any]]:
        """查询 AUR，返回 {包名: RPC 结果}；不存在的包不出现在结果中"""
        if not names:
            return {}
        query = urlencode([("arg[]", n) for n in names])
        url = f"{self.aur_url}/rpc/v5/info?{query}"
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as resp:  # nosec B310
                data = json.loads(resp.read().decode())
        except (OSError, ValueError) as e:
            raise FetchError(f"查询 AUR 失败: {e}") from e
        if not isinstance(data, dict):
            raise FetchError(f"AUR 返回格式异常: {type(data).__name__}")
        if data.get("type") == "error":
            raise FetchError(f"AUR 返回错误: {data.get('error', '')}")
        results = data.get("results") or []
        return {r["Name"]: r for r in results if isinstance(r, dict) and "Name" in r}

    def sync(self, pkgbase: str) -> Path:
        """克隆或更新 pkgbase 的构建描述仓库"""
        dest = self.workdir / pkgbase
        if (dest / ".git").exists():
            run_cmd(
                ["git", "pull", "--ff-only"], cwd=str(dest),
                label="git pull", executor=self._executor,
            )
        else:
            self.workdir.mkdir(parents=True, exist_ok=True)
            run_cmd(
                ["git", "clone", f"{self.aur_url}/{pkgbase}.git", str(dest)],
                cwd=str(self.workdir), label="git clone", executor=self._executor,
            )
        return dest

    def get(self, names: list[str]) -> list[PackageSource]:
        ordered: list[PackageSource] = []
        self._visit(names, ordered, done=set(), visiting=set(), required=True)
        logger.info("AUR 源码就绪: %s", ", ".join(s.base for s in ordered))
        return ordered

    def _visit(
        self, names: list[str], ordered: list[PackageSource],
        done: set[str], visiting: set[str], required: bool,
    ) -> None:
        known = self.info(names)
        if required:
            for name in names:
                if name not in known:
                    raise FetchError("AUR 中不存在该包", package=name)

        for name in names:
            if name not in known:
                continue
            base = known[name].get("PackageBase") or name
            if base in done or base in visiting:
                continue
            visiting.add(base)
            try:
                src = load_package_source(self.sync(base))
            except (ExecutionError, MetadataError) as e:
                raise FetchError(str(e), package=base) from e

            deps = [d for d in src.depends if d not in src.names]
            if deps:
                self._visit(deps, ordered, done, visiting, required=False)

            visiting.discard(base)
            done.add(base)
            ordered.append(src)
