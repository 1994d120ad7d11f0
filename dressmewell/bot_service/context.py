"""Shared dependencies passed into handler setup functions."""

from __future__ import annotations

from dataclasses import dataclass

from dressmewell.bot_service.scans import ScanRegistry
from dressmewell.storage import UserStorage


@dataclass(slots=True)
class BotContext:
    """Container for objects shared across handlers."""

    storage: UserStorage
    scans: ScanRegistry
