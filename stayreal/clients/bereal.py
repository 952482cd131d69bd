"""
HTTP client for the remote moment and token endpoints.

These helpers attach device credentials to outgoing calls and exchange refresh
credentials for fresh token pairs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from stayreal.core.config import ApiSettings
from stayreal.core.errors import TokenExchangeError
from stayreal.models import AuthenticationDetails, TokenPair

DEVICE_ID_HEADER = "bereal-device-id"


@dataclass(frozen=True)
class ApiRequest:
    """Description of an authenticated call, replayable on retry."""

    method: str
    path: str
    params: Dict[str, Any] = field(default_factory=dict)
    json: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=dict)


class BeRealClient:
    """Send authenticated requests and exchange refresh credentials."""

    def __init__(
        self,
        settings: ApiSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._base_url = str(settings.base_url).rstrip("/")
        self._http = httpx.AsyncClient(
            timeout=settings.timeout_seconds,
            transport=transport,
            headers={"user-agent": settings.user_agent},
        )

    def _default_headers(self, device_id: str) -> Dict[str, str]:
        return {
            DEVICE_ID_HEADER: device_id,
            "accept": "application/json",
        }

    async def send(
        self, request: ApiRequest, details: AuthenticationDetails
    ) -> httpx.Response:
        """Send ``request`` carrying the access token and device id in ``details``."""
        headers = self._default_headers(details.device_id)
        headers.update(request.headers)
        headers["authorization"] = f"Bearer {details.access_token}"

        return await self._http.request(
            request.method,
            f"{self._base_url}/{request.path.lstrip('/')}",
            params=request.params or None,
            json=request.json,
            headers=headers,
        )

    async def exchange_refresh_token(
        self, *, device_id: str, refresh_token: str
    ) -> TokenPair:
        """
        Exchange a refresh credential for a new token pair.

        Servers that do not rotate refresh credentials may omit
        ``refresh_token`` in the response; the submitted one is kept then.
        """
        payload: Dict[str, Any] = {
            "grant_type": "refresh_token",
            "client_id": self._settings.client_id,
            "refresh_token": refresh_token,
        }
        if self._settings.client_secret:
            payload["client_secret"] = self._settings.client_secret

        response = await self._http.post(
            str(self._settings.token_url),
            json=payload,
            headers=self._default_headers(device_id),
        )

        if response.status_code != httpx.codes.OK:
            raise TokenExchangeError(response.text, status_code=response.status_code)

        token_payload = response.json()
        access_token = token_payload.get("access_token")
        new_refresh_token = token_payload.get("refresh_token") or refresh_token
        expires_in = token_payload.get("expires_in")

        if not access_token:
            raise TokenExchangeError(
                "Incomplete refresh payload returned from token endpoint.",
                status_code=response.status_code,
            )

        return TokenPair(
            access_token=access_token,
            refresh_token=new_refresh_token,
            expires_in=int(expires_in) if expires_in is not None else None,
        )

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["ApiRequest", "BeRealClient", "DEVICE_ID_HEADER"]
