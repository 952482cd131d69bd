"""Expose constructed client wrappers."""

from .bereal import ApiRequest, BeRealClient
from .permissions import PermissionProvider, StaticPermissionProvider
from .sqlite_store import SQLiteBlobStore
from .topics import FirebaseTopicClient, NoopTopicClient, TopicClient, build_topic_client

__all__ = [
    "ApiRequest",
    "BeRealClient",
    "FirebaseTopicClient",
    "NoopTopicClient",
    "PermissionProvider",
    "SQLiteBlobStore",
    "StaticPermissionProvider",
    "TopicClient",
    "build_topic_client",
]
