"""
Keeps push topic membership consistent with the persisted region preference.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from stayreal.clients.sqlite_store import SQLiteBlobStore
from stayreal.clients.topics import TopicClient
from stayreal.core.errors import SubscriptionError
from stayreal.core.execution import ExecutionContext

logger = logging.getLogger(__name__)


class RegionSubscriptionManager:
    """Switch the device's region, persisting it only once subscribed.

    Steps run strictly in sequence and concurrent calls are serialized:

    1. unsubscribe the persisted region's topic (best effort),
    2. subscribe the new region's topic (mandatory),
    3. persist the new region.

    The persisted value is therefore either the previous region or a topic
    that was successfully subscribed.
    """

    _NAMESPACE = "preferences"
    _KEY = "region"

    def __init__(
        self,
        store: SQLiteBlobStore,
        topics: TopicClient,
        context: ExecutionContext,
    ) -> None:
        self._store = store
        self._topics = topics
        self._context = context
        self._lock = asyncio.Lock()

    async def get_region(self) -> Optional[str]:
        return await self._context.run_blocking(
            self._store.get, namespace=self._NAMESPACE, key=self._KEY
        )

    async def set_region(self, region: str) -> None:
        if not region:
            raise ValueError("Region must be a non-empty topic name.")

        async with self._lock:
            previous = await self.get_region()
            if previous:
                await self._unsubscribe_quietly(previous)

            try:
                await self._topics.subscribe(region)
            except SubscriptionError:
                logger.error("Subscription to %s failed; keeping region %s", region, previous)
                raise
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Subscription to %s failed; keeping region %s", region, previous)
                raise SubscriptionError(region, str(exc) or type(exc).__name__) from exc

            await self._context.run_blocking(
                self._store.put, namespace=self._NAMESPACE, key=self._KEY, value=region
            )
            logger.info("Region preference set to %s", region)

    async def _unsubscribe_quietly(self, topic: str) -> None:
        try:
            await self._topics.unsubscribe(topic)
        except Exception as exc:  # pylint: disable=broad-except
            # An orphaned subscription only costs stray notifications.
            logger.warning("Failed to unsubscribe from %s: %s", topic, exc)


__all__ = ["RegionSubscriptionManager"]
