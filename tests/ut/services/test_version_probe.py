"""VersionProbe 单元测试"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from archbuild.core.exceptions import VersionRefreshError
from archbuild.services.build import VersionProbe


class TestVersionProbe:
    def test_pinned_package_is_noop(self, make_source):
        pkg = make_source("imgur", ver="0.4")
        tool = MagicMock()
        probe = VersionProbe(tool)
        assert probe.refresh(pkg) is pkg
        assert str(pkg.version) == "0.4-1"
        tool.prepare_source.assert_not_called()

    def test_live_package_version_replaced(self, make_source, fake_tool):
        pkg = make_source("wlc-git", ver="0.0.1")
        fake_tool.prepared["wlc-git"] = "0.0.9.r5.gabc"
        probe = VersionProbe(fake_tool)
        result = probe.refresh(pkg)
        assert result is pkg
        assert pkg.version.version == "0.0.9.r5.gabc"
        assert fake_tool.calls == [("prepare", "wlc-git")]

    def test_tool_failure_raises_version_refresh_error(self, make_source, fake_tool):
        pkg = make_source("wlc-git")
        fake_tool.fail_prepare.add("wlc-git")
        with pytest.raises(VersionRefreshError, match="wlc-git") as exc:
            VersionProbe(fake_tool).refresh(pkg)
        assert exc.value.package == "wlc-git"
        assert exc.value.code == "VERSION_REFRESH_ERROR"

    def test_broken_metadata_raises_version_refresh_error(self, make_source):
        pkg = make_source("foo-git")
        tool = MagicMock()
        tool.prepare_source.side_effect = lambda path: (path / ".SRCINFO").write_text("garbage")
        with pytest.raises(VersionRefreshError, match="缺少字段"):
            VersionProbe(tool).refresh(pkg)

    def test_undecodable_metadata_raises_version_refresh_error(self, make_source):
        pkg = make_source("foo-git")
        tool = MagicMock()
        tool.prepare_source.side_effect = lambda path: (path / ".SRCINFO").write_bytes(
            b"pkgbase = foo-git\n\tpkgver = 1\xff\n\tpkgrel = 1\n\npkgname = foo-git\n",
        )
        with pytest.raises(VersionRefreshError) as exc:
            VersionProbe(tool).refresh(pkg)
        assert exc.value.package == "foo-git"
