"""Tests for the repository resolver."""
import json
from unittest.mock import Mock, call

import pytest

from esdoc_uploader.models import Message
from esdoc_uploader.services.resolver import RepositoryResolver, build_locator


def _write_manifest(tmp_path, contents) -> str:
    path = tmp_path / "package.json"
    if not isinstance(contents, str):
        contents = json.dumps(contents)
    path.write_text(contents, encoding="utf-8")
    return str(path)


def _errors(reporter):
    return [c.args[0] for c in reporter.error.call_args_list]


class TestBuildLocator:
    def test_adds_extension(self):
        assert build_locator("homer0", "projext") == "git@github.com:homer0/projext.git"

    def test_does_not_duplicate_extension(self):
        assert build_locator("homer0", "projext.git") == "git@github.com:homer0/projext.git"


class TestExplicitUrl:
    def test_valid_url(self):
        reporter = Mock()
        resolver = RepositoryResolver(reporter)

        assert resolver.resolve("git@github.com:homer0/wootils.git") == "git@github.com:homer0/wootils.git"
        reporter.error.assert_not_called()

    @pytest.mark.parametrize(
        "url",
        [
            "git:homer0/jimpex.git",
            "https://github.com/homer0/jimpex.git",
            "git@github.com:homer0/jimpex",
            "git@github.com:homer0/nested/jimpex.git",
            "git@github.com:a/b.git\n",
            "git@github.com:auteur/r\u00e9po.git",
            "",
        ],
    )
    def test_invalid_url_reports_once(self, url):
        reporter = Mock()
        resolver = RepositoryResolver(reporter)

        assert resolver.resolve(url) is None
        reporter.error.assert_called_once_with(Message.INVALID_URL.value)


class TestManifest:
    def test_string_repository(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, {"repository": "a/b"})

        locator = RepositoryResolver(reporter, manifest).resolve()

        assert locator == "git@github.com:a/b.git"
        reporter.error.assert_not_called()

    def test_record_repository(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(
            tmp_path,
            {"repository": {"type": "git", "url": "https://github.com/a/b.git"}},
        )

        assert RepositoryResolver(reporter, manifest).resolve() == "git@github.com:a/b.git"
        reporter.error.assert_not_called()

    def test_record_repository_without_extension(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(
            tmp_path,
            {"repository": {"type": "git", "url": "github.com/homer0/parserror"}},
        )

        assert RepositoryResolver(reporter, manifest).resolve() == "git@github.com:homer0/parserror.git"

    def test_record_repository_scp_style(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(
            tmp_path,
            {"repository": {"type": "git", "url": "git@github.com:homer0/parserror.git"}},
        )

        assert RepositoryResolver(reporter, manifest).resolve() == "git@github.com:homer0/parserror.git"

    def test_missing_manifest(self, tmp_path):
        reporter = Mock()
        resolver = RepositoryResolver(reporter, str(tmp_path / "package.json"))

        assert resolver.resolve() is None
        assert reporter.error.call_args_list == [
            call(Message.NO_PACKAGE.value),
            call(Message.INVALID_PACKAGE_URL.value),
        ]

    def test_unparseable_manifest_counts_as_missing(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, "{ not json")

        assert RepositoryResolver(reporter, manifest).resolve() is None
        assert _errors(reporter) == [Message.NO_PACKAGE.value, Message.INVALID_PACKAGE_URL.value]

    def test_no_repository_field(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, {"name": "project"})

        assert RepositoryResolver(reporter, manifest).resolve() is None
        assert _errors(reporter) == [Message.NO_REPOSITORY.value, Message.INVALID_PACKAGE_URL.value]

    @pytest.mark.parametrize("repository", ["some/invalid/url", "justname", "a/", "/b"])
    def test_invalid_string_format(self, tmp_path, repository):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, {"repository": repository})

        assert RepositoryResolver(reporter, manifest).resolve() is None
        assert _errors(reporter) == [Message.INVALID_FORMAT.value, Message.INVALID_PACKAGE_URL.value]

    def test_string_with_non_ascii_characters(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, {"repository": "auteur/r\u00e9po"})

        assert RepositoryResolver(reporter, manifest).resolve() is None
        assert _errors(reporter) == [Message.INVALID_FORMAT.value, Message.INVALID_PACKAGE_URL.value]

    def test_string_with_invalid_characters(self, tmp_path):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, {"repository": "some one/repo"})

        assert RepositoryResolver(reporter, manifest).resolve() is None
        assert _errors(reporter) == [Message.INVALID_FORMAT.value, Message.INVALID_PACKAGE_URL.value]

    @pytest.mark.parametrize(
        "repository",
        [
            {"type": "svn"},
            {"type": "svn", "url": "https://github.com/a/b"},
            {"type": "git", "url": "https://gitlab.com/a/b.git"},
            {"type": "git"},
        ],
    )
    def test_only_github_records(self, tmp_path, repository):
        reporter = Mock()
        manifest = _write_manifest(tmp_path, {"repository": repository})

        assert RepositoryResolver(reporter, manifest).resolve() is None
        assert _errors(reporter) == [Message.ONLY_GITHUB.value, Message.INVALID_PACKAGE_URL.value]

    def test_default_manifest_is_read_from_working_directory(self, tmp_path, monkeypatch):
        reporter = Mock()
        _write_manifest(tmp_path, {"repository": "homer0/parserror"})
        monkeypatch.chdir(tmp_path)

        assert RepositoryResolver(reporter).resolve() == "git@github.com:homer0/parserror.git"
