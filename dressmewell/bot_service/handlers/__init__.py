"""Register message and command handlers."""

from __future__ import annotations

from aiogram import Router

from dressmewell.bot_service.context import BotContext

from . import body_scan, reset, start


def setup_handlers(router: Router, context: BotContext) -> None:
    """Attach all handler groups to the provided router."""

    start.setup(router, context)
    reset.setup(router, context)
    body_scan.setup(router, context)
