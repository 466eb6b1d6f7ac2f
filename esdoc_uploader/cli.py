"""Command line interface for esdoc_uploader package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.logging import RichHandler

from . import __version__
from .cli_progress import render_configuration_summary
from .models import UploadConfig
from .orchestrator import ESDocUploader


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            env_level = os.getenv("LOG_LEVEL") or "INFO"
            level = getattr(logging, env_level.upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _build_config(args: argparse.Namespace) -> UploadConfig:
    try:
        config = UploadConfig.from_env(
            host=args.host,
            poll_interval=args.poll_interval,
            max_polls=args.max_polls,
            manifest_path=str(args.manifest) if args.manifest else None,
        )
    except ValueError as exc:
        raise CLIError(f"invalid ESDOC_* environment value: {exc}") from exc

    if config.poll_interval < 0:
        raise CLIError("poll interval must not be negative")
    if config.max_polls is not None and config.max_polls < 1:
        raise CLIError("max polls must be at least 1")
    return config


async def _run_upload(url: Optional[str], config: UploadConfig) -> int:
    uploader = ESDocUploader(url, config=config)
    if not uploader.can_upload():
        return 1

    result = await uploader.upload()
    return 0 if result.success else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="esdoc-uploader",
        description="Generate the documentation of a GitHub repository on doc.esdoc.org.",
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help=(
            "Repository as git@github.com:[author]/[repository].git "
            "(default: the repository field of package.json)"
        ),
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="package.json to read the repository from (default from ESDOC_MANIFEST)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="ESDoc API host (default from ESDOC_API_HOST or doc.esdoc.org)",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between status checks (default from ESDOC_POLL_INTERVAL or 4)",
    )
    parser.add_argument(
        "--max-polls",
        type=int,
        default=None,
        help="Give up after this many status checks (default: wait indefinitely)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print upload messages")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the effective configuration before uploading",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"esdoc-uploader {__version__}",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    try:
        config = _build_config(args)
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.summary:
        render_configuration_summary(
            {
                "Repository": args.url or f"(from {config.manifest_path})",
                "API Host": config.host,
                "Poll Interval": f"{config.poll_interval:g}s",
                "Max Polls": config.max_polls or "unlimited",
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    try:
        return asyncio.run(_run_upload(args.url, config))
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
