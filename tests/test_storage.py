"""Smoke tests for the profile storage helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dressmewell.body_shape import BodyShape, UnknownBodyShapeError
from dressmewell.storage import InvalidUserIdError, UserStorage


@pytest.mark.asyncio
async def test_load_creates_profile(tmp_path: Path) -> None:
    storage = UserStorage(tmp_path / "users")

    profile = await storage.load("test-user")

    assert profile.user_id == "test-user"
    assert profile.body_shape is None
    assert (tmp_path / "users" / "test-user" / "profile.json").exists()


@pytest.mark.asyncio
async def test_update_body_shape_persists_canonical_value(tmp_path: Path) -> None:
    storage = UserStorage(tmp_path / "users")

    await storage.update_body_shape("user-1", "Inverted Triangle")
    reloaded = await storage.load("user-1")

    assert reloaded.body_shape == "inverted-triangle"


@pytest.mark.asyncio
async def test_update_body_shape_accepts_enum(tmp_path: Path) -> None:
    storage = UserStorage(tmp_path / "users")

    profile = await storage.update_body_shape("user-1", BodyShape.PEAR)

    assert profile.body_shape == "pear"
    raw = json.loads((tmp_path / "users" / "user-1" / "profile.json").read_text(encoding="utf-8"))
    assert raw["body_shape"] == "pear"


@pytest.mark.asyncio
async def test_update_body_shape_rejects_raw_model_label(tmp_path: Path) -> None:
    storage = UserStorage(tmp_path / "users")

    with pytest.raises(UnknownBodyShapeError):
        await storage.update_body_shape("user-1", "pear body shape")

    assert (await storage.load("user-1")).body_shape is None


@pytest.mark.asyncio
async def test_load_drops_invalid_stored_shape(tmp_path: Path) -> None:
    path = tmp_path / "users" / "user-2" / "profile.json"
    path.parent.mkdir(parents=True)
    path.write_text(
        json.dumps({"user_id": "user-2", "body_shape": "pear body shape", "legacy": True}),
        encoding="utf-8",
    )
    storage = UserStorage(tmp_path / "users")

    profile = await storage.load("user-2")

    assert profile.body_shape is None


@pytest.mark.asyncio
async def test_update_style_preferences_ignores_unknown_keys(tmp_path: Path) -> None:
    storage = UserStorage(tmp_path / "users")
    profile = await storage.load("user-3")

    await storage.update_style_preferences(
        profile,
        {"favorite_colors": ["Black", "Red"], "shoe_size": ["38"]},
    )
    await storage.update_details(profile, name=" Ada ", email="ada@example.com")
    reloaded = await storage.load("user-3")

    assert reloaded.style_preferences["favorite_colors"] == ["Black", "Red"]
    assert reloaded.style_preferences["avoid_types"] == []
    assert "shoe_size" not in reloaded.style_preferences
    assert reloaded.name == "Ada"
    assert reloaded.email == "ada@example.com"


@pytest.mark.asyncio
async def test_reset_user_removes_profile(tmp_path: Path) -> None:
    storage = UserStorage(tmp_path / "users")
    await storage.update_body_shape("user-reset", "apple")

    await storage.reset_user("user-reset")

    new_profile = await storage.load("user-reset")
    assert new_profile.body_shape is None


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["..", ".", "", "a/b", "../escape", "a\\b"])
async def test_user_ids_must_stay_inside_root(tmp_path: Path, user_id: str) -> None:
    storage = UserStorage(tmp_path / "users")

    with pytest.raises(InvalidUserIdError):
        await storage.update_body_shape(user_id, "pear")
    with pytest.raises(InvalidUserIdError):
        await storage.reset_user(user_id)

    assert not (tmp_path / "profile.json").exists()
    assert (tmp_path / "users").exists()
