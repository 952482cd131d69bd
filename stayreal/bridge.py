"""
Command surface exposed to the view layer.

``SessionBridge`` wires the credential store, token refresher, request client,
region subscription manager, moment cache and permission flow together. Every
command either resolves with a value or raises ``BridgeCommandError`` carrying
a descriptive message; no internal failure escapes in any other form.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from stayreal.clients.bereal import ApiRequest, BeRealClient
from stayreal.clients.permissions import PermissionProvider, StaticPermissionProvider
from stayreal.clients.sqlite_store import SQLiteBlobStore
from stayreal.clients.topics import TopicClient, build_topic_client
from stayreal.core.config import AppSettings
from stayreal.core.errors import AuthError, BridgeCommandError, SubscriptionError
from stayreal.core.execution import ExecutionContext
from stayreal.models import AuthenticationDetails, Moment
from stayreal.schemas import (
    AuthDetailsPayload,
    MomentPayload,
    PermissionStatusPayload,
    SetRegionPayload,
)
from stayreal.services import (
    CredentialStore,
    MomentCache,
    NotificationPermissionService,
    RegionSubscriptionManager,
    RequestClient,
    TokenCipherService,
    TokenRefresher,
)

logger = logging.getLogger(__name__)


def _error_fields(exc: ValidationError) -> str:
    return ", ".join(
        ".".join(str(part) for part in error["loc"]) or "payload"
        for error in exc.errors()
    )


def _describe(exc: Exception) -> str:
    if isinstance(exc, (AuthError, BridgeCommandError)):
        return exc.message
    if isinstance(exc, SubscriptionError):
        return str(exc)
    if isinstance(exc, ValidationError):
        return f"Invalid arguments: {_error_fields(exc)}"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"Request failed with status {exc.response.status_code}"
    return str(exc) or type(exc).__name__


@contextmanager
def _rejecting(command: str) -> Iterator[None]:
    try:
        yield
    except BridgeCommandError:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        message = _describe(exc)
        logger.warning("Command %s rejected: %s", command, message)
        raise BridgeCommandError(command, message) from exc


class SessionBridge:
    """Owns the session components and the execution context they share."""

    def __init__(
        self,
        *,
        store: SQLiteBlobStore,
        cipher: TokenCipherService,
        api: BeRealClient,
        topics: TopicClient,
        permissions: PermissionProvider,
        context: ExecutionContext,
        supports_runtime_permission_prompt: bool = True,
        default_region: str = "europe-west",
    ) -> None:
        self._context = context
        self._api = api
        self._default_region = default_region
        self._closed = False

        self.credentials = CredentialStore(store, cipher)
        self.refresher = TokenRefresher(self.credentials, api, context)
        self.requests = RequestClient(self.credentials, self.refresher, api, context)
        self.regions = RegionSubscriptionManager(store, topics, context)
        self.moments = MomentCache(store)
        self.permissions = NotificationPermissionService(
            permissions,
            supports_runtime_prompt=supports_runtime_permission_prompt,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        topics: TopicClient | None = None,
        permissions: PermissionProvider | None = None,
    ) -> "SessionBridge":
        """Build a bridge from configuration, creating its own execution context."""
        context = ExecutionContext()
        notifications = settings.notifications
        return cls(
            store=SQLiteBlobStore(settings.storage.db_path),
            cipher=TokenCipherService(secret=settings.storage.encryption_secret),
            api=BeRealClient(settings.api, transport=transport),
            topics=topics or build_topic_client(notifications, context),
            permissions=permissions or StaticPermissionProvider(),
            context=context,
            supports_runtime_permission_prompt=notifications.supports_runtime_permission_prompt,
            default_region=notifications.default_region,
        )

    async def __aenter__(self) -> "SessionBridge":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the HTTP client and stop the execution context."""
        if self._closed:
            return
        self._closed = True
        await self._api.aclose()
        await self._context.aclose()

    async def set_auth_details(
        self, device_id: str, access_token: str, refresh_token: str
    ) -> None:
        with _rejecting("setAuthDetails"):
            details = AuthenticationDetails(
                device_id=device_id,
                access_token=access_token,
                refresh_token=refresh_token,
            )
            await self._context.run_blocking(self.credentials.set, details)

    async def get_auth_details(self) -> AuthDetailsPayload:
        with _rejecting("getAuthDetails"):
            details = await self._context.run_blocking(self.credentials.get)
            if details is None:
                raise BridgeCommandError("getAuthDetails", "No authentication details stored")
            return AuthDetailsPayload(
                device_id=details.device_id,
                access_token=details.access_token,
                refresh_token=details.refresh_token,
            )

    async def clear_auth_details(self) -> None:
        with _rejecting("clearAuthDetails"):
            await self._context.run_blocking(self.credentials.clear)

    async def refresh_token(self) -> None:
        with _rejecting("refreshToken"):
            await self.refresher.refresh()

    async def set_region(self, region: str) -> None:
        with _rejecting("setRegion"):
            await self.regions.set_region(region)

    async def get_region(self) -> Optional[str]:
        with _rejecting("getRegion"):
            return await self.regions.get_region()

    async def fetch_last_moment(self) -> MomentPayload:
        with _rejecting("fetchLastMoment"):
            region = await self.regions.get_region() or self._default_region
            response = await self.requests.execute(
                ApiRequest(method="GET", path=f"bereal/moments/last/{quote(region, safe='')}")
            )
            response.raise_for_status()
            try:
                moment = Moment.model_validate(response.json())
            except ValueError as exc:
                # Covers both schema mismatches and non-JSON bodies.
                detail = (
                    _error_fields(exc) if isinstance(exc, ValidationError) else "body is not JSON"
                )
                raise ValueError(f"Malformed moment response: {detail}") from exc
            await self._context.run_blocking(self.moments.set_last_moment_id, moment.id)
            return MomentPayload(
                id=moment.id,
                region=moment.region,
                start_date=moment.start_date,
                end_date=moment.end_date,
            )

    async def get_last_moment_id(self) -> Optional[str]:
        with _rejecting("getLastMomentId"):
            return await self._context.run_blocking(self.moments.get_last_moment_id)

    async def request_permissions(self) -> PermissionStatusPayload:
        with _rejecting("requestPermissions"):
            status = await self.permissions.request_permissions()
            return PermissionStatusPayload(status=status)

    async def dispatch(
        self, command: str, payload: Optional[Mapping[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Run a command by its view-layer name with a camelCase payload."""
        args = dict(payload or {})
        with _rejecting(command):
            if command == "setAuthDetails":
                details = AuthDetailsPayload.model_validate(args)
                await self.set_auth_details(
                    details.device_id, details.access_token, details.refresh_token
                )
                return None
            if command == "getAuthDetails":
                return (await self.get_auth_details()).model_dump(by_alias=True)
            if command == "clearAuthDetails":
                await self.clear_auth_details()
                return None
            if command == "refreshToken":
                await self.refresh_token()
                return None
            if command == "setRegion":
                await self.set_region(SetRegionPayload.model_validate(args).region)
                return None
            if command == "getRegion":
                return {"region": await self.get_region()}
            if command == "fetchLastMoment":
                return (await self.fetch_last_moment()).model_dump(by_alias=True)
            if command == "getLastMomentId":
                return {"id": await self.get_last_moment_id()}
            if command == "requestPermissions":
                return (await self.request_permissions()).model_dump(
                    by_alias=True, mode="json"
                )
            raise BridgeCommandError(command, f"Unknown command: {command}")


__all__ = ["SessionBridge"]
