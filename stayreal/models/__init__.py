"""Domain models exchanged between the session components."""

from .auth import AuthenticationDetails, TokenPair
from .moment import Moment

__all__ = ["AuthenticationDetails", "Moment", "TokenPair"]
