"""Utility for verifying that the session bridge configuration is intact.

The tool performs three checks:

1. It attempts to instantiate ``AppSettings`` using the provided ``.env`` file,
   surfacing missing or malformed entries (most often the storage encryption
   secret) before the session bridge refuses to start.
2. It opens the credential database at the configured path so permission or
   path problems show up before the first ``setAuthDetails`` command.
3. It can record and verify a checksum for the ``.env`` file so unexpected
   edits are detected. A changed encryption secret makes every stored
   credential unreadable, which otherwise only shows up as a forced logout.

Example usages::

    # Validate settings and record the expected checksum.
    python -m scripts.check_env record --env-file /opt/stayreal/.env \
        --hash-file /opt/stayreal/.env.sha256

    # Run later (e.g. from cron/systemd) to alert on drift.
    python -m scripts.check_env verify --env-file /opt/stayreal/.env \
        --hash-file /opt/stayreal/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sqlite3
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from stayreal.clients.sqlite_store import SQLiteBlobStore
from stayreal.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_STORAGE_ERROR = 4
EXIT_RUNTIME_ERROR = 5


def _compute_hash(env_file: Path) -> str:
    """Return the SHA256 checksum for the target environment file."""
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Load settings from the supplied env file, raising on invalid values."""
    _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def _open_storage(settings: AppSettings) -> None:
    SQLiteBlobStore(settings.storage.db_path)


def _record_checksum(env_file: Path, hash_file: Path) -> int:
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
        "If the storage encryption secret changed, stored credentials can no "
        "longer be opened and users will have to sign in again.",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate session bridge settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the repo root).",
        )
        subparser.add_argument(
            "--skip-storage",
            action="store_true",
            help="Do not open the credential database.",
        )

    for name, help_text, hash_help in (
        ("record", "Validate settings and store the checksum baseline.",
         "Location to write the checksum baseline."),
        ("verify", "Validate settings and compare the checksum with the baseline.",
         "Location of the previously recorded checksum baseline."),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        add_common_arguments(subparser)
        subparser.add_argument("--hash-file", required=True, type=Path, help=hash_help)

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
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not args.skip_storage:
        try:
            _open_storage(settings)
        except (OSError, sqlite3.Error) as exc:
            print(
                f"Cannot open credential storage at {settings.storage.db_path}: {exc}",
                file=sys.stderr,
            )
            return EXIT_STORAGE_ERROR

    command: str = args.command
    handlers: dict[str, Callable[[], int]] = {
        "record": lambda: _record_checksum(env_file, args.hash_file),
        "verify": lambda: _verify_checksum(env_file, args.hash_file),
        "check": lambda: EXIT_OK,
    }
    return handlers[command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
