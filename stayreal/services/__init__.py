"""Service layer exports."""

from .credentials import CredentialStore
from .moment_cache import MomentCache
from .permissions import NotificationPermissionService
from .region_subscription import RegionSubscriptionManager
from .request_client import RequestClient
from .token_cipher import TokenCipherService
from .token_refresher import TokenRefresher

__all__ = [
    "CredentialStore",
    "MomentCache",
    "NotificationPermissionService",
    "RegionSubscriptionManager",
    "RequestClient",
    "TokenCipherService",
    "TokenRefresher",
]
