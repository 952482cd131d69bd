"""
FastAPI routes exposing the session bridge commands to the view layer.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from stayreal.bridge import SessionBridge
from stayreal.core.config import AppSettings
from stayreal.core.errors import BridgeCommandError
from stayreal.dependencies import SettingsDependency, get_session_bridge
from stayreal.schemas import (
    AuthDetailsPayload,
    CommandRejection,
    MomentPayload,
    PermissionStatusPayload,
    SetRegionPayload,
)

router = APIRouter()

Bridge = Annotated[SessionBridge, Depends(get_session_bridge)]


async def bridge_command_error_handler(
    request: Request, exc: BridgeCommandError
) -> JSONResponse:
    """Render a rejected command as a uniform JSON body."""
    body = CommandRejection(command=exc.command, error=exc.message)
    return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=body.model_dump())


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(settings: AppSettings = SettingsDependency) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.put("/auth/details", status_code=HTTPStatus.NO_CONTENT)
async def set_auth_details(payload: AuthDetailsPayload, bridge: Bridge) -> None:
    await bridge.set_auth_details(
        payload.device_id, payload.access_token, payload.refresh_token
    )


@router.get(
    "/auth/details",
    response_model=AuthDetailsPayload,
    response_model_by_alias=True,
)
async def get_auth_details(bridge: Bridge) -> AuthDetailsPayload:
    return await bridge.get_auth_details()


@router.delete("/auth/details", status_code=HTTPStatus.NO_CONTENT)
async def clear_auth_details(bridge: Bridge) -> None:
    await bridge.clear_auth_details()


@router.post("/auth/refresh", status_code=HTTPStatus.NO_CONTENT)
async def refresh_token(bridge: Bridge) -> None:
    await bridge.refresh_token()


@router.put("/preferences/region", status_code=HTTPStatus.NO_CONTENT)
async def set_region(payload: SetRegionPayload, bridge: Bridge) -> None:
    await bridge.set_region(payload.region)


@router.get(
    "/moments/last",
    response_model=MomentPayload,
    response_model_by_alias=True,
)
async def fetch_last_moment(bridge: Bridge) -> MomentPayload:
    return await bridge.fetch_last_moment()


@router.post("/permissions/notifications", response_model=PermissionStatusPayload)
async def request_permissions(bridge: Bridge) -> PermissionStatusPayload:
    return await bridge.request_permissions()


@router.post("/commands/{command}")
async def dispatch_command(
    command: str,
    bridge: Bridge,
    payload: Annotated[Optional[Dict[str, Any]], Body()] = None,
) -> JSONResponse:
    """Invoke any bridge command by its camelCase name."""
    result = await bridge.dispatch(command, payload)
    return JSONResponse(status_code=HTTPStatus.OK, content=result)


__all__ = ["bridge_command_error_handler", "router"]
