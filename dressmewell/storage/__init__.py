"""JSON-backed storage for user profiles."""

from .repository import InvalidUserIdError, UserProfile, UserStorage

__all__ = ["InvalidUserIdError", "UserProfile", "UserStorage"]
