"""
Single-flight exchange of the refresh credential for a new token pair.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

import httpx

from stayreal.core.errors import AuthError, TokenExchangeError
from stayreal.core.execution import ExecutionContext
from stayreal.models import AuthenticationDetails, TokenPair
from stayreal.services.credentials import CredentialStore

logger = logging.getLogger(__name__)


class TokenExchanger(Protocol):
    async def exchange_refresh_token(
        self, *, device_id: str, refresh_token: str
    ) -> TokenPair: ...


class TokenRefresher:
    """Refresh the stored access token, collapsing concurrent callers.

    The first caller starts the exchange and publishes it as the in-flight
    task; callers arriving before it finishes await that same task. The
    handle is cleared inside the task, before its outcome is delivered, so a
    later call always starts a fresh exchange.
    """

    _REJECTED_STATUSES = frozenset({400, 401, 403})

    def __init__(
        self,
        credentials: CredentialStore,
        exchanger: TokenExchanger,
        context: ExecutionContext,
    ) -> None:
        self._credentials = credentials
        self._exchanger = exchanger
        self._context = context
        self._inflight: Optional[asyncio.Task[AuthenticationDetails]] = None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None

    async def refresh(self) -> AuthenticationDetails:
        task = self._inflight
        if task is None:
            logger.info("Starting token refresh")
            task = asyncio.get_running_loop().create_task(self._refresh_once())
            self._inflight = task
        else:
            logger.debug("Joining in-flight token refresh")
        # A cancelled waiter must not cancel the exchange the others share.
        return await asyncio.shield(task)

    async def _refresh_once(self) -> AuthenticationDetails:
        try:
            details = await self._context.run_blocking(self._credentials.get)
            if details is None:
                raise AuthError.unauthorized("No authentication details stored")

            pair = await self._exchange(details)
            refreshed = details.with_tokens(pair)
            replaced = await self._context.run_blocking(
                self._credentials.replace, details, refreshed
            )
            if not replaced:
                # Cleared or replaced by a new sign-in while the exchange ran.
                logger.warning("Discarding refreshed tokens; credentials changed")
                raise AuthError.unauthorized("Credentials changed during refresh")
            logger.info("Token refresh succeeded")
            return refreshed
        finally:
            self._inflight = None

    async def _exchange(self, details: AuthenticationDetails) -> TokenPair:
        try:
            return await self._exchanger.exchange_refresh_token(
                device_id=details.device_id,
                refresh_token=details.refresh_token,
            )
        except TokenExchangeError as exc:
            logger.warning("Token endpoint rejected refresh (status=%s)", exc.status_code)
            if exc.status_code in self._REJECTED_STATUSES:
                raise AuthError.unauthorized(str(exc) or "Refresh token rejected") from exc
            raise AuthError.unknown(str(exc) or "Token exchange failed") from exc
        except httpx.TransportError as exc:
            logger.warning("Token refresh failed on transport: %s", exc)
            raise AuthError.network_error(str(exc) or "Network error") from exc
        except AuthError:
            raise
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unexpected token refresh failure")
            raise AuthError.unknown(str(exc) or type(exc).__name__) from exc


__all__ = ["TokenExchanger", "TokenRefresher"]
