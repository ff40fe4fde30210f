"""构建产物收集

扫描包目录（非递归），找出包文件 (*.pkg.tar.xz / *.pkg.tar.zst)，
并按文件名对应关系为每个包文件配对其分离签名 (<包文件名>.sig)。

配对规则:
  - 签名去掉 .sig 后缀后必须与某个包文件名完全一致
  - 找不到对应包文件的签名直接丢弃，不报错
  - 每个包文件在结果中恰好出现一次，结果按文件名排序
"""

from __future__ import annotations

import logging
from pathlib import Path

from archbuild.core.exceptions import HarvestError
from archbuild.core.models import PACKAGE_SUFFIXES, SIGNATURE_SUFFIX, BuildArtifact

logger = logging.getLogger(__name__)


class ArtifactHarvester:
    """构建产物收集器"""

    def __init__(
        self,
        package_suffixes: tuple[str, ...] = PACKAGE_SUFFIXES,
        signature_suffix: str = SIGNATURE_SUFFIX,
    ) -> None:
        self.package_suffixes = tuple(package_suffixes)
        self.signature_suffix = signature_suffix

    def harvest(self, pkg_dir: str | Path) -> list[BuildArtifact]:
        """收集目录中的构建产物

        异常:
            HarvestError: 目录无法列出
        """
        root = Path(pkg_dir)
        try:
            names = sorted(p.name for p in root.iterdir() if p.is_file())
        except OSError as e:
            raise HarvestError(f"无法列出产物目录 {root}: {e}", package=root.name) from e

        artifacts = {
            n: BuildArtifact(package=root / n)
            for n in names if n.endswith(self.package_suffixes)
        }

        cut = len(self.signature_suffix)
        for n in names:
            if not n.endswith(self.signature_suffix):
                continue
            artifact = artifacts.get(n[:-cut])
            if artifact is None:
                logger.debug("忽略无对应包文件的签名: %s", n)
                continue
            artifact.signature = root / n

        return list(artifacts.values())
