"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path
from typing import Callable

import httpx
import pytest

from stayreal.bridge import SessionBridge
from stayreal.clients import BeRealClient, SQLiteBlobStore, StaticPermissionProvider
from stayreal.core.config import ApiSettings
from stayreal.core.execution import ExecutionContext
from stayreal.services import CredentialStore, TokenCipherService

API_BASE_URL = "https://api.test/api"
TOKEN_URL = "https://auth.test/token"


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(base_url=API_BASE_URL, token_url=TOKEN_URL)


@pytest.fixture
def context():
    ctx = ExecutionContext(max_workers=2)
    yield ctx
    ctx.close()


@pytest.fixture
def blob_store(tmp_path: Path) -> SQLiteBlobStore:
    return SQLiteBlobStore(str(tmp_path / "stayreal.db"))


@pytest.fixture
def cipher() -> TokenCipherService:
    return TokenCipherService(secret="unit-test-secret")


@pytest.fixture
def credential_store(blob_store: SQLiteBlobStore, cipher: TokenCipherService) -> CredentialStore:
    return CredentialStore(blob_store, cipher)


@pytest.fixture
def bridge_factory(
    tmp_path: Path, api_settings: ApiSettings, cipher: TokenCipherService
) -> Callable[..., SessionBridge]:
    """Build bridges whose network calls are answered by ``handler``."""

    def _build(handler, *, topics, permissions=None, supports_prompt: bool = True) -> SessionBridge:
        return SessionBridge(
            store=SQLiteBlobStore(str(tmp_path / "bridge.db")),
            cipher=cipher,
            api=BeRealClient(api_settings, transport=httpx.MockTransport(handler)),
            topics=topics,
            permissions=permissions or StaticPermissionProvider(),
            context=ExecutionContext(max_workers=2),
            supports_runtime_permission_prompt=supports_prompt,
            default_region="europe-west",
        )

    return _build
