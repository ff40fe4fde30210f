"""LocalRepository 单元测试"""

from __future__ import annotations

import pytest

from archbuild.core.exceptions import RepositoryError
from archbuild.services.repository import LocalRepository, parse_desc


class TestParseDesc:
    def test_sections(self):
        desc = parse_desc("%NAME%\nfoo\n\n%VERSION%\n1:2.0-3\n\n%DEPENDS%\na\nb\n")
        assert desc == {"NAME": ["foo"], "VERSION": ["1:2.0-3"], "DEPENDS": ["a", "b"]}


class TestLocalRepository:
    def test_missing_db_means_everything_updated(self, tmp_path, make_source):
        repo = LocalRepository("repo", tmp_path / "nowhere")
        pkgs = [make_source("a"), make_source("b")]
        assert repo.get_updated(pkgs) == pkgs

    def test_same_version_not_updated(self, make_source, make_repo_db):
        repo = LocalRepository("repo", make_repo_db({"imgur": "0.4-1"}))
        assert repo.get_updated([make_source("imgur", ver="0.4")]) == []

    def test_newer_version_updated(self, make_source, make_repo_db):
        repo = LocalRepository("repo", make_repo_db({"imgur": "0.4-1"}))
        pkg = make_source("imgur", ver="0.10")
        assert repo.get_updated([pkg]) == [pkg]

    def test_older_version_not_updated(self, make_source, make_repo_db):
        repo = LocalRepository("repo", make_repo_db({"imgur": "1:0.1-1"}))
        assert repo.get_updated([make_source("imgur", ver="9.9")]) == []

    def test_split_package_missing_output(self, make_source, make_repo_db):
        repo = LocalRepository("repo", make_repo_db({"foo": "1.0-1"}))
        pkg = make_source("foo", names=["foo", "foo-docs"])
        assert repo.get_updated([pkg]) == [pkg]

    def test_order_preserved(self, make_source, make_repo_db):
        repo = LocalRepository("repo", make_repo_db({"b": "1.0-1"}))
        pkgs = [make_source("c"), make_source("b"), make_source("a")]
        assert [p.base for p in repo.get_updated(pkgs)] == ["c", "a"]

    def test_holdings_cached_until_reload(self, make_repo_db):
        repo_dir = make_repo_db({"a": "1.0-1"})
        repo = LocalRepository("repo", repo_dir)
        assert set(repo.holdings()) == {"a"}
        make_repo_db({"a": "1.0-1", "b": "2.0-1"})
        assert set(repo.holdings()) == {"a"}
        repo.reload()
        assert set(repo.holdings()) == {"a", "b"}

    def test_corrupt_db_raises(self, tmp_path):
        (tmp_path / "repo.db.tar.gz").write_bytes(b"not a tarball")
        repo = LocalRepository("repo", tmp_path)
        with pytest.raises(RepositoryError, match="读取仓库数据库失败"):
            repo.holdings()
