"""包版本比较

实现 pacman 的版本排序规则 (vercmp)：版本串按「数字段 / 字母段」切分后
逐段比较，数字段按数值比较，因此 1.10 > 1.9；字母段按字典序比较，且
字母段视为预发布，1.0a < 1.0。

VersionDescriptor 由 epoch、version、release 三部分组成，依次比较。
epoch 缺省 (None) 按 0 比较：repo-add 写入的 %VERSION% 省略 "0:"，
而 makepkg --printsrcinfo 会保留显式的 epoch = 0。
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

_VERSION_RE = re.compile(r"^(?:(?P<epoch>\d+):)?(?P<version>[^-:]+)-(?P<release>[^-:]+)$")


def _isdigit(c: str) -> bool:
    return "0" <= c <= "9"


def _isalpha(c: str) -> bool:
    return "a" <= c <= "z" or "A" <= c <= "Z"


def _isalnum(c: str) -> bool:
    return _isdigit(c) or _isalpha(c)


def vercmp(a: str, b: str) -> int:
    """比较两个版本串，返回 -1 / 0 / 1

    参数:
        a: 左侧版本串（不含 epoch 和 release）
        b: 右侧版本串

    返回:
        int: a < b 返回 -1，相等返回 0，a > b 返回 1

    示例:
        >>> vercmp("1.10", "1.9")
        1
        >>> vercmp("1.0a", "1.0")
        -1
    """
    if a == b:
        return 0

    i = j = 0
    n, m = len(a), len(b)
    while i < n and j < m:
        sep_i = i
        while i < n and not _isalnum(a[i]):
            i += 1
        sep_j = j
        while j < m and not _isalnum(b[j]):
            j += 1
        if i >= n or j >= m:
            break

        # 分隔符更长的一方更新
        if (i - sep_i) != (j - sep_j):
            return -1 if (i - sep_i) < (j - sep_j) else 1

        start_i, start_j = i, j
        if _isdigit(a[i]):
            while i < n and _isdigit(a[i]):
                i += 1
            while j < m and _isdigit(b[j]):
                j += 1
            is_num = True
        else:
            while i < n and _isalpha(a[i]):
                i += 1
            while j < m and _isalpha(b[j]):
                j += 1
            is_num = False

        seg_a = a[start_i:i]
        seg_b = b[start_j:j]

        # 段类型不同：数字段总是大于字母段
        if not seg_b:
            return 1 if is_num else -1

        if is_num:
            seg_a = seg_a.lstrip("0")
            seg_b = seg_b.lstrip("0")
            if len(seg_a) != len(seg_b):
                return 1 if len(seg_a) > len(seg_b) else -1

        if seg_a != seg_b:
            return -1 if seg_a < seg_b else 1

    if i >= n and j >= m:
        return 0

    # 剩余部分以字母开头的一方视为预发布，较小
    if (i >= n and not _isalpha(b[j])) or (i < n and _isalpha(a[i])):
        return -1
    return 1


@functools.total_ordering
@dataclass(eq=False)
class VersionDescriptor:
    """包版本：[epoch:]version-release"""

    version: str
    release: str = "1"
    epoch: int | None = None

    def __post_init__(self) -> None:
        self.release = str(self.release)
        if self.epoch is not None and self.epoch < 0:
            raise ValueError(f"epoch 不能为负数: {self.epoch}")

    @classmethod
    def parse(cls, text: str) -> VersionDescriptor:
        """解析 `[epoch:]version-release` 形式的版本串"""
        m = _VERSION_RE.match(text.strip())
        if m is None:
            raise ValueError(f"无法解析版本串: {text!r}")
        epoch = m.group("epoch")
        return cls(
            version=m.group("version"),
            release=m.group("release"),
            epoch=int(epoch) if epoch is not None else None,
        )

    def compare(self, other: VersionDescriptor) -> int:
        """依次比较 epoch / version / release，返回 -1 / 0 / 1"""
        left = self.epoch or 0
        right = other.epoch or 0
        if left != right:
            return -1 if left < right else 1
        result = vercmp(self.version, other.version)
        if result != 0:
            return result
        return vercmp(self.release, other.release)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionDescriptor):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: VersionDescriptor) -> bool:
        if not isinstance(other, VersionDescriptor):
            return NotImplemented
        return self.compare(other) < 0

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        prefix = f"{self.epoch}:" if self.epoch is not None else ""
        return f"{prefix}{self.version}-{self.release}"
