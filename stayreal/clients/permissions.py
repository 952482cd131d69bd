"""Platform notification permission providers."""

from __future__ import annotations

from typing import Protocol

from stayreal.schemas import PermissionState


class PermissionProvider(Protocol):
    """Platform hook answering and prompting for notification permission."""

    async def current_state(self) -> PermissionState: ...

    async def prompt(self) -> PermissionState: ...


class StaticPermissionProvider:
    """Provider for hosts where the permission state is fixed by configuration.

    ``prompt`` resolves to ``decision`` so headless hosts can model a user
    accepting or declining the prompt.
    """

    def __init__(
        self,
        state: PermissionState = PermissionState.PROMPT,
        *,
        decision: PermissionState = PermissionState.GRANTED,
    ) -> None:
        self._state = state
        self._decision = decision

    async def current_state(self) -> PermissionState:
        return self._state

    async def prompt(self) -> PermissionState:
        self._state = self._decision
        return self._state


__all__ = ["PermissionProvider", "StaticPermissionProvider"]
