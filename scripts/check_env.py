"""Verify the relay's environment configuration before (re)starting it.

The tool performs three checks:

1. It instantiates ``AppSettings`` from the provided ``.env`` file, surfacing
   missing or malformed TikTok credentials before the relay starts failing
   callbacks.
2. It warns about combinations that load fine but behave unexpectedly, such as
   redirect mode without a front-end URL or debug routes in production.
3. It can record and verify a checksum for the ``.env`` file so unexpected
   edits are detected.

Example usages::

    # Validate required settings are present and record the expected checksum.
    python -m scripts.check_env record --env-file /opt/tiktok-relay/.env \
        --hash-file /opt/tiktok-relay/.env.sha256

    # Run later (e.g. from cron/systemd) to alert on drift.
    python -m scripts.check_env verify --env-file /opt/tiktok-relay/.env \
        --hash-file /opt/tiktok-relay/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

from pydantic import ValidationError

from tiktok_relay.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5


def _compute_hash(env_file: Path) -> str:
    """Return the SHA256 checksum for the target environment file."""
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Load settings from the supplied env file, raising on invalid values."""
    _load_env_file(str(env_file))
    return AppSettings(_env_file=str(env_file))  # type: ignore[call-arg]


def collect_warnings(settings: AppSettings) -> list[str]:
    """Return human-readable warnings for settings that load but misbehave."""
    warnings: list[str] = []

    redirect_uri = settings.tiktok.redirect_uri
    if redirect_uri != redirect_uri.strip():
        warnings.append(
            "TIKTOK_REDIRECT_URI has surrounding whitespace; TikTok compares it verbatim."
        )
    parsed = urlparse(redirect_uri.strip())
    if parsed.scheme != "https" and parsed.hostname not in ("localhost", "127.0.0.1"):
        warnings.append("TIKTOK_REDIRECT_URI should use https outside local development.")

    if settings.callback_response_mode == "redirect" and not settings.frontend_base_url:
        warnings.append(
            "CALLBACK_RESPONSE_MODE=redirect without FRONTEND_URL; "
            "the callback will answer in plain text."
        )

    if settings.enable_debug_routes and settings.environment == "production":
        warnings.append("ENABLE_DEBUG_ROUTES is on in production.")

    return warnings


def _report(settings: AppSettings) -> None:
    print(
        f"Settings OK (env={settings.environment}, "
        f"callback_mode={settings.callback_response_mode}, "
        f"scopes={','.join(settings.oauth.scopes)})."
    )
    for warning in collect_warnings(settings):
        print(f"warning: {warning}", file=sys.stderr)


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    """Persist the current checksum to ``hash_file``."""
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    """Compare the current checksum to the recorded baseline."""
    if not hash_file.exists():
        print(
            f"Expected checksum file {hash_file} is missing. "
            "Re-run with the 'record' command to establish a baseline.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected == actual:
        print("Environment checksum OK.")
        return EXIT_OK

    print(
        "Environment checksum mismatch!\n"
        f"  expected: {expected}\n"
        f"  actual:   {actual}\n"
        "Investigate recent changes before restarting the relay.",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate relay settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the repo root).",
        )

    for name, help_text in (
        ("record", "Validate settings and store the checksum baseline."),
        ("verify", "Validate settings and compare the checksum with the baseline."),
    ):
        command_parser = subparsers.add_parser(name, help=help_text)
        add_common_arguments(command_parser)
        command_parser.add_argument(
            "--hash-file",
            required=True,
            type=Path,
            help="Location of the checksum baseline.",
        )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate settings without touching any checksum files.",
    )
    add_common_arguments(check_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file

    if not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        settings = _load_settings(env_file)
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    _report(settings)

    command: str = args.command
    handlers: dict[str, Callable[[], int]] = {
        "record": lambda: _record_checksum(env_file, args.hash_file),
        "verify": lambda: _verify_checksum(env_file, args.hash_file),
        "check": lambda: EXIT_OK,
    }
    return handlers[command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
