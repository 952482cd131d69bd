"""Notification permission flow gated by the platform's prompt capability."""

from __future__ import annotations

import logging

from stayreal.clients.permissions import PermissionProvider
from stayreal.schemas import PermissionState

logger = logging.getLogger(__name__)


class NotificationPermissionService:
    """Resolve the notification permission status, prompting only when needed."""

    def __init__(
        self, provider: PermissionProvider, *, supports_runtime_prompt: bool
    ) -> None:
        self._provider = provider
        self._supports_runtime_prompt = supports_runtime_prompt

    async def request_permissions(self) -> PermissionState:
        """
        Return the platform's permission decision.

        Platforms without a runtime prompt grant or deny implicitly, so their
        current state is final. Otherwise the prompt is shown unless
        permission is already granted, and the call completes with the
        user's decision.
        """
        state = await self._provider.current_state()
        if not self._supports_runtime_prompt or state is PermissionState.GRANTED:
            return state

        logger.info("Prompting for notification permission (current=%s)", state.value)
        return await self._provider.prompt()


__all__ = ["NotificationPermissionService"]
