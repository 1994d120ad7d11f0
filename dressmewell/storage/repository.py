"""Simple JSON-backed storage for user profiles."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dressmewell.body_shape.shapes import BodyShape, UnknownBodyShapeError, parse_body_shape

logger = logging.getLogger(__name__)

class InvalidUserIdError(ValueError):
    """Raised when a user id cannot be used as a single storage directory name."""


STYLE_PREFERENCE_KEYS = ("favorite_colors", "preferred_styles", "avoid_types")


@dataclass(slots=True)
class UserProfile:
    """Serializable representation of a stylist user."""

    user_id: str
    name: str = ""
    email: str = ""
    body_shape: Optional[str] = None
    style_preferences: Dict[str, List[str]] = field(
        default_factory=lambda: {key: [] for key in STYLE_PREFERENCE_KEYS},
    )
    updated_at: Optional[str] = None

    def touch(self) -> None:
        """Update the modification timestamp."""

        self.updated_at = datetime.now(timezone.utc).isoformat()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UserProfile":
        known = {item.name for item in fields(cls)}
        profile = cls(**{key: value for key, value in payload.items() if key in known})
        if profile.body_shape is not None:
            try:
                profile.body_shape = parse_body_shape(profile.body_shape).value
            except UnknownBodyShapeError:
                logger.warning(
                    "Dropping invalid body shape %r stored for user %s.",
                    profile.body_shape,
                    profile.user_id,
                )
                profile.body_shape = None
        return profile


class UserStorage:
    """Manages reading and writing user profiles as JSON files."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, asyncio.Lock] = {}

    def _user_dir(self, user_id: str) -> Path:
        if not user_id or user_id in {".", ".."} or Path(user_id).name != user_id or "\\" in user_id:
            raise InvalidUserIdError(f"Invalid user id: {user_id!r}")
        return self._root / user_id

    def _profile_path(self, user_id: str) -> Path:
        return self._user_dir(user_id) / "profile.json"

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        if user_id not in self._locks:
            self._locks[user_id] = asyncio.Lock()
        return self._locks[user_id]

    async def load(self, user_id: str) -> UserProfile:
        """Load an existing profile or create a new one."""

        async with self._lock_for(user_id):
            path = self._profile_path(user_id)
            if not path.exists():
                profile = UserProfile(user_id=user_id)
                profile.touch()
                await self._write_profile(path, profile)
                return profile
            data = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return UserProfile.from_dict(json.loads(data))

    async def save(self, profile: UserProfile) -> None:
        """Persist the profile to disk."""

        profile.touch()
        async with self._lock_for(profile.user_id):
            path = self._profile_path(profile.user_id)
            await self._write_profile(path, profile)

    async def _write_profile(self, path: Path, profile: UserProfile) -> None:
        body = json.dumps(asdict(profile), ensure_ascii=False, indent=2)
        await asyncio.to_thread(self._write_file, path, body)

    @staticmethod
    def _write_file(path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")

    async def update_body_shape(self, user_id: str, shape: str | BodyShape) -> UserProfile:
        """Store a confirmed body shape; only canonical values are accepted."""

        canonical = parse_body_shape(shape)
        profile = await self.load(user_id)
        profile.body_shape = canonical.value
        await self.save(profile)
        return profile

    async def update_style_preferences(
        self,
        profile: UserProfile,
        preferences: Mapping[str, List[str]],
    ) -> None:
        """Merge known preference lists into the profile."""

        for key in STYLE_PREFERENCE_KEYS:
            if key in preferences:
                profile.style_preferences[key] = list(preferences[key])
        await self.save(profile)

    async def update_details(
        self,
        profile: UserProfile,
        *,
        name: str | None = None,
        email: str | None = None,
    ) -> None:
        """Update display name and email."""

        if name is not None:
            profile.name = name.strip()
        if email is not None:
            profile.email = email.strip()
        await self.save(profile)

    async def reset_user(self, user_id: str) -> None:
        """Remove stored data for the given user."""

        user_dir = self._user_dir(user_id)
        async with self._lock_for(user_id):
            await asyncio.to_thread(self._delete_dir, user_dir)

    @staticmethod
    def _delete_dir(path: Path) -> None:
        if path.exists():
            shutil.rmtree(path)
