"""
Provide the session bridge owned by the running application.
"""

from fastapi import Depends, HTTPException, Request, status

from stayreal.bridge import SessionBridge


def get_session_bridge(request: Request) -> SessionBridge:
    """Return the bridge created during application startup."""
    bridge = getattr(request.app.state, "bridge", None)
    if bridge is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session bridge is not running.",
        )
    return bridge


BridgeDependency = Depends(get_session_bridge)

__all__ = ["BridgeDependency", "get_session_bridge"]
