"""
Authenticated request execution with refresh-then-retry on expiry.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from stayreal.clients.bereal import ApiRequest
from stayreal.core.errors import AuthError
from stayreal.core.execution import ExecutionContext
from stayreal.models import AuthenticationDetails
from stayreal.services.credentials import CredentialStore
from stayreal.services.token_refresher import TokenRefresher

logger = logging.getLogger(__name__)


class RequestSender(Protocol):
    async def send(
        self, request: ApiRequest, details: AuthenticationDetails
    ) -> httpx.Response: ...


class RequestClient:
    """Execute calls with the stored credentials, retrying once after a 401."""

    def __init__(
        self,
        credentials: CredentialStore,
        refresher: TokenRefresher,
        sender: RequestSender,
        context: ExecutionContext,
    ) -> None:
        self._credentials = credentials
        self._refresher = refresher
        self._sender = sender
        self._context = context

    async def execute(self, request: ApiRequest) -> httpx.Response:
        """Send ``request``; at most one refresh and one retry per call.

        Responses other than 401 and transport errors are returned or raised
        unchanged.
        """
        details = await self._context.run_blocking(self._credentials.get)
        if details is None:
            raise AuthError.unauthorized("No authentication details stored")

        response = await self._sender.send(request, details)
        if response.status_code != httpx.codes.UNAUTHORIZED:
            return response

        logger.info("%s %s returned 401; refreshing credentials", request.method, request.path)
        refreshed = await self._credentials_after_rejection(details)

        response = await self._sender.send(request, refreshed)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("%s %s still unauthorized after refresh", request.method, request.path)
            raise AuthError.unauthorized("Request unauthorized after token refresh")
        return response

    async def _credentials_after_rejection(
        self, rejected: AuthenticationDetails
    ) -> AuthenticationDetails:
        current = await self._context.run_blocking(self._credentials.get)
        if current is not None and current.access_token != rejected.access_token:
            # Another caller already refreshed after our request went out.
            return current
        try:
            return await self._refresher.refresh()
        except AuthError as exc:
            raise AuthError.unauthorized(exc.message) from exc


__all__ = ["RequestClient", "RequestSender"]
