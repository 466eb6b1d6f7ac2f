"""
Repository resolver - turns an argument or package.json into a git locator.

Every failure is reported through the injected reporter and results in None;
nothing here raises to the caller.
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from ..models import Message
from ..protocols import IReporter

log = logging.getLogger(__name__)

LOCATOR_PATTERN = re.compile(r"git@[\w.-]+:[\w.-]+/[\w.-]+\.git", re.ASCII)
GIT_EXTENSION = ".git"


def build_locator(author: str, repository: str) -> str:
    """Format author/repository as a GitHub ssh locator."""
    if repository.endswith(GIT_EXTENSION):
        repository = repository[: -len(GIT_EXTENSION)]
    return f"git@github.com:{author}/{repository}.git"


class RepositoryResolver:
    """
    Resolves the repository locator sent to the API.

    Usage:
        resolver = RepositoryResolver(reporter)
        locator = resolver.resolve()                 # from ./package.json
        locator = resolver.resolve("git@github.com:a/b.git")
    """

    def __init__(self, reporter: IReporter, manifest_path: str = "package.json"):
        self._reporter = reporter
        self._manifest_path = manifest_path

    def resolve(self, url: Optional[str] = None) -> Optional[str]:
        if url is None:
            return self.from_manifest()
        return self.validate(url)

    def validate(self, url: str) -> Optional[str]:
        if LOCATOR_PATTERN.fullmatch(url):
            return url
        self._report(Message.INVALID_URL)
        return None

    def from_manifest(self) -> Optional[str]:
        manifest = self._read_manifest()
        result = None
        if manifest is None:
            self._report(Message.NO_PACKAGE)
        else:
            result = self._from_repository_field(manifest.get("repository"))

        if result is None:
            self._report(Message.INVALID_PACKAGE_URL)
        return result

    def _read_manifest(self) -> Optional[dict]:
        path = Path(self._manifest_path).resolve()
        try:
            contents = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.debug("Could not read manifest %s: %s", path, exc)
            return None
        if not isinstance(contents, dict):
            log.debug("Manifest %s is not a JSON object", path)
            return None
        return contents

    def _from_repository_field(self, field: Any) -> Optional[str]:
        if not field:
            self._report(Message.NO_REPOSITORY)
            return None

        if isinstance(field, str):
            parts = field.split("/")
            if len(parts) != 2 or not all(parts):
                self._report(Message.INVALID_FORMAT)
                return None
            return self._checked(build_locator(parts[0], parts[1]))

        url = field.get("url") if isinstance(field, dict) else None
        if (
            not isinstance(field, dict)
            or field.get("type") != "git"
            or not isinstance(url, str)
            or "github" not in url
        ):
            self._report(Message.ONLY_GITHUB)
            return None

        # scp-style urls (git@github.com:a/b.git) separate the author with ':'
        parts = re.split(r"[/:]", url)
        if len(parts) < 2 or not parts[-2] or not parts[-1]:
            self._report(Message.INVALID_FORMAT)
            return None
        return self._checked(build_locator(parts[-2], parts[-1]))

    def _checked(self, locator: str) -> Optional[str]:
        if LOCATOR_PATTERN.fullmatch(locator):
            log.debug("Resolved repository locator %s", locator)
            return locator
        self._report(Message.INVALID_FORMAT)
        return None

    def _report(self, message: Message) -> None:
        self._reporter.error(message.value)
