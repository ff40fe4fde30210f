"""ArtifactHarvester 单元测试"""

from __future__ import annotations

import pytest

from archbuild.core.exceptions import HarvestError
from archbuild.services.build import ArtifactHarvester


def _touch(d, *names):
    for n in names:
        (d / n).write_bytes(b"x")


class TestArtifactHarvester:
    def test_pairs_signatures(self, tmp_path):
        _touch(tmp_path, "foo-1.pkg.tar.xz", "foo-1.pkg.tar.xz.sig", "bar-1.pkg.tar.xz")
        artifacts = ArtifactHarvester().harvest(tmp_path)
        assert [(a.package.name, a.signature and a.signature.name) for a in artifacts] == [
            ("bar-1.pkg.tar.xz", None),
            ("foo-1.pkg.tar.xz", "foo-1.pkg.tar.xz.sig"),
        ]

    def test_orphan_signature_dropped(self, tmp_path):
        _touch(tmp_path, "baz.sig", "qux-2.pkg.tar.zst")
        artifacts = ArtifactHarvester().harvest(tmp_path)
        assert len(artifacts) == 1
        assert artifacts[0].package == tmp_path / "qux-2.pkg.tar.zst"
        assert artifacts[0].signature is None

    def test_ignores_other_files_and_subdirs(self, tmp_path):
        _touch(tmp_path, "PKGBUILD", ".SRCINFO", "src.tar.gz", "foo-1.pkg.tar.xz")
        (tmp_path / "sub.pkg.tar.xz").mkdir()
        (tmp_path / "src").mkdir()
        _touch(tmp_path / "src", "nested-1.pkg.tar.xz")
        artifacts = ArtifactHarvester().harvest(tmp_path)
        assert [a.package.name for a in artifacts] == ["foo-1.pkg.tar.xz"]

    def test_empty_dir(self, tmp_path):
        assert ArtifactHarvester().harvest(tmp_path) == []

    def test_custom_suffix(self, tmp_path):
        _touch(tmp_path, "foo-1.pkg.tar.gz", "foo-1.pkg.tar.xz")
        artifacts = ArtifactHarvester(package_suffixes=(".pkg.tar.gz",)).harvest(tmp_path)
        assert [a.package.name for a in artifacts] == ["foo-1.pkg.tar.gz"]

    def test_str(self, tmp_path):
        _touch(tmp_path, "foo-1.pkg.tar.xz", "foo-1.pkg.tar.xz.sig", "bar-1.pkg.tar.xz")
        artifacts = ArtifactHarvester().harvest(tmp_path)
        assert [str(a) for a in artifacts] == [
            "bar-1.pkg.tar.xz", "foo-1.pkg.tar.xz (foo-1.pkg.tar.xz.sig)",
        ]

    def test_missing_dir_raises(self, tmp_path):
        with pytest.raises(HarvestError, match="无法列出"):
            ArtifactHarvester().harvest(tmp_path / "gone")
