"""Push-notification topic management backed by firebase-admin messaging."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from stayreal.core.config import NotificationSettings
from stayreal.core.errors import SubscriptionError
from stayreal.core.execution import ExecutionContext

logger = logging.getLogger(__name__)

_APP_NAME = "stayreal"


class TopicClient(Protocol):
    async def subscribe(self, topic: str) -> None: ...

    async def unsubscribe(self, topic: str) -> None: ...


def get_firebase_app(credentials_path: Optional[str]) -> firebase_admin.App:
    """Return the named firebase-admin app, initialising it on first use."""
    try:
        return firebase_admin.get_app(_APP_NAME)
    except ValueError:
        pass
    cred = (
        credentials.Certificate(credentials_path)
        if credentials_path
        else credentials.ApplicationDefault()
    )
    return firebase_admin.initialize_app(cred, name=_APP_NAME)


class FirebaseTopicClient:
    """Subscribe this device's registration token to messaging topics.

    The SDK calls are blocking, so they run on the bridge's execution context
    and the outcome is awaited by the caller.
    """

    def __init__(
        self,
        *,
        registration_token: str,
        context: ExecutionContext,
        app: firebase_admin.App | None = None,
    ) -> None:
        if not registration_token:
            raise ValueError("A messaging registration token is required.")
        self._token = registration_token
        self._context = context
        self._app = app

    async def subscribe(self, topic: str) -> None:
        await self._manage(messaging.subscribe_to_topic, topic, "subscribe")

    async def unsubscribe(self, topic: str) -> None:
        await self._manage(messaging.unsubscribe_from_topic, topic, "unsubscribe")

    async def _manage(self, call, topic: str, operation: str) -> None:
        try:
            response = await self._context.run_blocking(
                call, [self._token], topic, app=self._app
            )
        except (FirebaseError, ValueError) as exc:
            raise SubscriptionError(topic, str(exc), operation=operation) from exc

        if response.failure_count:
            reasons = ", ".join(error.reason for error in response.errors) or "unknown"
            raise SubscriptionError(topic, reasons, operation=operation)


class NoopTopicClient:
    """Topic client used when push notifications are disabled."""

    async def subscribe(self, topic: str) -> None:
        logger.debug("Notifications disabled; skipping subscribe to %s", topic)

    async def unsubscribe(self, topic: str) -> None:
        logger.debug("Notifications disabled; skipping unsubscribe from %s", topic)


def build_topic_client(
    settings: NotificationSettings, context: ExecutionContext
) -> TopicClient:
    """Pick the topic client matching the notification settings."""
    if not settings.enabled or not settings.registration_token:
        return NoopTopicClient()
    return FirebaseTopicClient(
        registration_token=settings.registration_token,
        context=context,
        app=get_firebase_app(settings.credentials_path),
    )


__all__ = [
    "FirebaseTopicClient",
    "NoopTopicClient",
    "TopicClient",
    "build_topic_client",
    "get_firebase_app",
]
