"""Command line interface for dogeup package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from rich.logging import RichHandler

from . import __version__
from .cli_progress import RunProgressDisplay, mask_secret, render_configuration_summary
from .models import DEFAULT_API_BASE_URL, InputParameters, UploadConfig
from .orchestrator import UploadOrchestrator
from .orchestrator.file_collector import default_workspace


# Environment variables consulted for each input, first set wins.
# INPUT_* are the names GitHub Actions uses for action inputs.
ACCESS_KEY_ENV = ("DOGECLOUD_ACCESS_KEY", "INPUT_ACCESS_KEY")
SECRET_KEY_ENV = ("DOGECLOUD_SECRET_KEY", "INPUT_SECRET_KEY")
BUCKET_ENV = ("DOGECLOUD_BUCKET", "INPUT_BUCKET")
LOCAL_PATH_ENV = ("INPUT_LOCAL_PATH",)
REMOTE_PATH_ENV = ("DOGECLOUD_REMOTE_PATH", "INPUT_REMOTE_PATH")
API_URL_ENV = ("DOGECLOUD_API_URL",)

_NOISY_LOGGERS = ("botocore", "boto3", "aioboto3", "aiobotocore", "urllib3", "httpx", "httpcore")


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default level is INFO so credential, per-file and retry lines are shown.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent:
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL")
        level = getattr(logging, (env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logging.getLevelName(level)


def _first_env(names: Sequence[str]) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _normalize_remote_path(remote_path: Optional[str]) -> Optional[str]:
    if remote_path is None:
        return None
    value = remote_path.strip()
    return value or None


def _parse_env_line(line: str) -> Optional[Tuple[str, str]]:
    """Parse ``[export ]KEY=value``; quotes around value are dropped."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if key.startswith("export "):
        key = key[len("export "):].strip()
    if not sep or not key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    return key, value


def _load_env_file(path: Path, override: bool = False) -> Dict[str, str]:
    """Export DOGECLOUD_*/INPUT_* style variables from a .env file.

    Variables already present in the environment win unless override is set.
    Returns the variables that were applied.
    """
    if not path.is_file():
        reason = "not found" if not path.exists() else "is not a file"
        raise CLIError(f"env file {reason}: {path}")

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    applied: Dict[str, str] = {}
    for key, value in filter(None, map(_parse_env_line, lines)):
        if override or key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    return applied


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.is_file() else None


def _build_params(args: argparse.Namespace) -> InputParameters:
    """Merge CLI arguments with environment fallbacks."""
    access_key = args.access_key or _first_env(ACCESS_KEY_ENV)
    secret_key = args.secret_key or _first_env(SECRET_KEY_ENV)
    bucket = args.bucket or _first_env(BUCKET_ENV)
    local_path = args.source or _first_env(LOCAL_PATH_ENV)
    remote_path = args.remote_path if args.remote_path is not None else _first_env(REMOTE_PATH_ENV)

    missing = [
        name
        for name, value in (
            ("access key", access_key),
            ("secret key", secret_key),
            ("bucket", bucket),
            ("local path", local_path),
        )
        if not value
    ]
    if missing:
        raise CLIError(f"missing required input: {', '.join(missing)}")

    return InputParameters(
        access_key=access_key,
        secret_key=secret_key,
        bucket_name=bucket,
        local_path=str(local_path),
        remote_path_prefix=_normalize_remote_path(remote_path),
    )


def _report_failure(message: str) -> None:
    print(f"ERROR: {message}", file=sys.stderr)
    if os.getenv("GITHUB_ACTIONS") == "true":
        print(f"::error::{message}")


async def _run_upload(params: InputParameters, config: UploadConfig, workspace: Path) -> int:
    orchestrator = UploadOrchestrator(params, config=config, workspace=workspace)
    RunProgressDisplay().attach(orchestrator)

    result = await orchestrator.run()
    if result.success:
        return 0

    _report_failure(result.message or "upload failed")
    return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doge-up",
        description="Upload a file or folder to DogeCloud object storage using a temporary credential.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="Local file or folder, absolute or relative to the workspace (env: INPUT_LOCAL_PATH)",
    )
    parser.add_argument(
        "-r",
        "--remote-path",
        default=None,
        help="Key prefix in the bucket (example: assets or assets/)",
    )
    parser.add_argument("--access-key", default=None, help="DogeCloud AccessKey (env: DOGECLOUD_ACCESS_KEY)")
    parser.add_argument("--secret-key", default=None, help="DogeCloud SecretKey (env: DOGECLOUD_SECRET_KEY)")
    parser.add_argument("--bucket", default=None, help="Bucket name (env: DOGECLOUD_BUCKET)")
    parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help="Root for relative source paths (default: GITHUB_WORKSPACE or current directory)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help=f"Token API base URL (default from DOGECLOUD_API_URL or {DEFAULT_API_BASE_URL})",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"doge-up {__version__}",
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
            _report_failure(str(exc))
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    try:
        params = _build_params(args)
    except CLIError as exc:
        _report_failure(str(exc))
        return 1

    workspace = args.workspace or default_workspace()
    config = UploadConfig(api_base_url=args.api_url or _first_env(API_URL_ENV) or DEFAULT_API_BASE_URL)

    if not args.silent:
        render_configuration_summary(
            {
                "Source": params.local_path,
                "Workspace": str(workspace),
                "Remote Path": params.remote_path_prefix or "(bucket root)",
                "Bucket": params.bucket_name,
                "Access Key": mask_secret(params.access_key),
                "API": config.api_base_url,
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    try:
        return asyncio.run(_run_upload(params, config, workspace))
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
