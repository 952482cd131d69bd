from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from stayreal.clients import ApiRequest, BeRealClient
from stayreal.core.config import ApiSettings
from stayreal.core.errors import AuthError, AuthErrorKind
from stayreal.core.execution import ExecutionContext
from stayreal.models import AuthenticationDetails
from stayreal.services import CredentialStore, RequestClient, TokenRefresher

INITIAL = AuthenticationDetails(device_id="d1", access_token="a1", refresh_token="r1")


class FakeBackend:
    """Answers API calls and token refreshes, recording every request."""

    def __init__(self, *, valid_token: str = "a2", token_status: int = 200) -> None:
        self.valid_token = valid_token
        self.token_status = token_status
        self.api_calls: list[httpx.Request] = []
        self.token_calls: list[dict] = []
        self.expected_concurrent_401s = 1
        self._unauthorized_seen = 0
        self._all_unauthorized = asyncio.Event()

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "auth.test":
            self.token_calls.append(json.loads(request.content))
            # Keep the exchange open long enough for concurrent callers to join.
            await asyncio.sleep(0.05)
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="invalid_grant")
            return httpx.Response(
                200,
                json={"access_token": "a2", "refresh_token": "r2", "expires_in": 3600},
            )

        self.api_calls.append(request)
        if request.headers["authorization"] == f"Bearer {self.valid_token}":
            return httpx.Response(200, json={"ok": True})
        self._unauthorized_seen += 1
        if self._unauthorized_seen >= self.expected_concurrent_401s:
            self._all_unauthorized.set()
        await self._all_unauthorized.wait()
        return httpx.Response(401, json={"error": "expired"})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(
    backend: FakeBackend,
    api_settings: ApiSettings,
    credential_store: CredentialStore,
    context: ExecutionContext,
) -> RequestClient:
    api = BeRealClient(api_settings, transport=httpx.MockTransport(backend.handler))
    refresher = TokenRefresher(credential_store, api, context)
    return RequestClient(credential_store, refresher, api, context)


REQUEST = ApiRequest(method="GET", path="/feeds/friends")


@pytest.mark.anyio
async def test_successful_request_is_returned_without_refresh(
    backend: FakeBackend, client: RequestClient, credential_store: CredentialStore
) -> None:
    backend.valid_token = "a1"
    credential_store.set(INITIAL)

    response = await client.execute(REQUEST)

    assert response.status_code == 200
    assert backend.token_calls == []
    sent = backend.api_calls[0]
    assert sent.headers["authorization"] == "Bearer a1"
    assert sent.headers["bereal-device-id"] == "d1"


@pytest.mark.anyio
async def test_non_401_errors_pass_through_unchanged(
    api_settings: ApiSettings, credential_store: CredentialStore, context: ExecutionContext
) -> None:
    credential_store.set(INITIAL)
    api = BeRealClient(
        api_settings, transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )
    refresher = TokenRefresher(credential_store, api, context)
    client = RequestClient(credential_store, refresher, api, context)

    response = await client.execute(REQUEST)
    await api.aclose()

    assert response.status_code == 500
    assert credential_store.get() == INITIAL


@pytest.mark.anyio
async def test_expired_token_is_refreshed_and_request_retried_once(
    backend: FakeBackend, client: RequestClient, credential_store: CredentialStore
) -> None:
    credential_store.set(INITIAL)

    response = await client.execute(REQUEST)

    assert response.status_code == 200
    assert [r.headers["authorization"] for r in backend.api_calls] == ["Bearer a1", "Bearer a2"]
    assert backend.token_calls == [
        {"grant_type": "refresh_token", "client_id": "android", "refresh_token": "r1"}
    ]
    assert credential_store.get() == AuthenticationDetails(
        device_id="d1", access_token="a2", refresh_token="r2"
    )


@pytest.mark.anyio
async def test_second_401_fails_unauthorized_after_single_retry(
    backend: FakeBackend, client: RequestClient, credential_store: CredentialStore
) -> None:
    backend.valid_token = "never-valid"
    credential_store.set(INITIAL)

    with pytest.raises(AuthError) as excinfo:
        await client.execute(REQUEST)

    assert excinfo.value.kind is AuthErrorKind.UNAUTHORIZED
    assert len(backend.api_calls) == 2
    assert len(backend.token_calls) == 1


@pytest.mark.anyio
async def test_failed_refresh_fails_unauthorized_without_retry(
    backend: FakeBackend, client: RequestClient, credential_store: CredentialStore
) -> None:
    backend.token_status = 500
    credential_store.set(INITIAL)

    with pytest.raises(AuthError) as excinfo:
        await client.execute(REQUEST)

    assert excinfo.value.kind is AuthErrorKind.UNAUTHORIZED
    assert len(backend.api_calls) == 1
    assert credential_store.get() == INITIAL


@pytest.mark.anyio
async def test_missing_credentials_fail_without_network_call(
    backend: FakeBackend, client: RequestClient
) -> None:
    with pytest.raises(AuthError) as excinfo:
        await client.execute(REQUEST)

    assert excinfo.value.kind is AuthErrorKind.UNAUTHORIZED
    assert backend.api_calls == []


@pytest.mark.anyio
async def test_concurrent_401s_share_a_single_refresh(
    backend: FakeBackend, client: RequestClient, credential_store: CredentialStore
) -> None:
    backend.expected_concurrent_401s = 2
    credential_store.set(INITIAL)

    first, second = await asyncio.gather(client.execute(REQUEST), client.execute(REQUEST))

    assert first.status_code == second.status_code == 200
    assert len(backend.token_calls) == 1
    assert sorted(r.headers["authorization"] for r in backend.api_calls) == [
        "Bearer a1",
        "Bearer a1",
        "Bearer a2",
        "Bearer a2",
    ]
