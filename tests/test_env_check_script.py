"""Tests for the environment drift detection script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import check_env

REQUIRED_ENV_KEYS = [
    "STAYREAL_STORAGE_ENCRYPTION_SECRET",
    "STAYREAL_STORAGE_DB_PATH",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _clear_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in REQUIRED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    hash_file = tmp_path / ".env.sha256"

    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(hash_file)])

    exit_code = check_env.main(argv)
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_record_and_verify_detects_rotated_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"
    db_path = str(tmp_path / "data" / "stayreal.db")

    _clear_required_env(monkeypatch)
    _write_env(
        env_file,
        STAYREAL_STORAGE_ENCRYPTION_SECRET="secret",
        STAYREAL_STORAGE_DB_PATH=db_path,
    )

    exit_code = check_env.main(
        ["record", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK
    assert hash_file.read_text(encoding="utf-8").strip()
    assert Path(db_path).exists()

    _clear_required_env(monkeypatch)
    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK

    _write_env(
        env_file,
        STAYREAL_STORAGE_ENCRYPTION_SECRET="rotated",
        STAYREAL_STORAGE_DB_PATH=db_path,
    )

    _clear_required_env(monkeypatch)
    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_CHECKSUM_ERROR


def test_validation_failure_for_missing_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(env_file, STAYREAL_STORAGE_DB_PATH=str(tmp_path / "stayreal.db"))

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_storage_open_failure_is_reported(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    _clear_required_env(monkeypatch)
    _write_env(
        env_file,
        STAYREAL_STORAGE_ENCRYPTION_SECRET="secret",
        STAYREAL_STORAGE_DB_PATH=str(blocker / "stayreal.db"),
    )

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_STORAGE_ERROR
    assert (
        check_env.main(["check", "--skip-storage", "--env-file", str(env_file)])
        == check_env.EXIT_OK
    )
