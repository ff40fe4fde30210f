"""测试公共夹具：伪构建工具、包源码目录、仓库数据库"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from archbuild.core.exceptions import ExecutionError
from archbuild.core.srcinfo import load_package_source


def render_srcinfo(
    base: str, ver: str = "1.0", rel: str = "1",
    epoch: int | None = None, names: list[str] | None = None,
    depends: list[str] | None = None,
) -> str:
    lines = [f"pkgbase = {base}", f"\tpkgver = {ver}", f"\tpkgrel = {rel}"]
    if epoch is not None:
        lines.append(f"\tepoch = {epoch}")
    for d in depends or []:
        lines.append(f"\tdepends = {d}")
    lines.append("")
    for n in names or [base]:
        lines.append(f"pkgname = {n}")
    return "\n".join(lines) + "\n"


class FakeBuildTool:
    """记录调用的 BuildTool 测试实现，不启动任何外部进程

    prepared: {目录名: 版本}：prepare_source 时改写 .SRCINFO 中的 pkgver
    fail_*: 对应操作抛 ExecutionError
    build_and_install 时在包目录写出 <base>-<ver>-<rel>-any.pkg.tar.xz (+ .sig)
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.prepared: dict[str, str] = {}
        self.fail_refresh = False
        self.fail_prepare: set[str] = set()
        self.fail_build: set[str] = set()
        self.sign = True

    def refresh_environment(self) -> None:
        self.calls.append(("refresh",))
        if self.fail_refresh:
            raise ExecutionError("sysupgrade失败 (rc=1): mirror down")

    def prepare_source(self, path: Path) -> None:
        self.calls.append(("prepare", Path(path).name))
        if Path(path).name in self.fail_prepare:
            raise ExecutionError("prepare失败 (rc=1): git fetch failed")
        new_ver = self.prepared.get(Path(path).name)
        if new_ver is not None:
            srcinfo = Path(path) / ".SRCINFO"
            text = srcinfo.read_text(encoding="utf-8")
            lines = [
                f"\tpkgver = {new_ver}" if ln.strip().startswith("pkgver") else ln
                for ln in text.splitlines()
            ]
            srcinfo.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def build_and_install(self, path: Path, env: dict[str, str] | None = None) -> None:
        self.calls.append(("build", Path(path).name, env))
        if Path(path).name in self.fail_build:
            raise ExecutionError("makepkg失败 (rc=4): compile error")
        pkg = load_package_source(path)
        for name in pkg.names:
            artifact = Path(path) / f"{name}-{pkg.version}-any.pkg.tar.xz"
            artifact.write_bytes(b"pkg")
            if self.sign:
                Path(f"{artifact}.sig").write_bytes(b"sig")

    def calls_of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture()
def fake_tool() -> FakeBuildTool:
    return FakeBuildTool()


@pytest.fixture()
def make_source(tmp_path):
    """在 tmp_path/sources/<base> 下创建包目录并返回 PackageSource"""

    def _make(base: str, **kwargs):
        d = tmp_path / "sources" / base
        d.mkdir(parents=True, exist_ok=True)
        (d / ".SRCINFO").write_text(render_srcinfo(base, **kwargs), encoding="utf-8")
        return load_package_source(d)

    return _make


@pytest.fixture()
def make_repo_db(tmp_path):
    """在 tmp_path/repo 下写出 <name>.db.tar.gz，packages 为 {包名: 版本串}"""

    def _make(packages: dict[str, str], name: str = "repo") -> Path:
        repo_dir = tmp_path / "repo"
        repo_dir.mkdir(parents=True, exist_ok=True)
        db = repo_dir / f"{name}.db.tar.gz"
        with tarfile.open(db, "w:gz") as tar:
            for pkg, version in packages.items():
                data = f"%FILENAME%\n{pkg}-{version}-any.pkg.tar.xz\n\n" \
                       f"%NAME%\n{pkg}\n\n%VERSION%\n{version}\n\n".encode()
                info = tarfile.TarInfo(f"{pkg}-{version}/desc")
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
        return repo_dir

    return _make
