"""Handler that clears stored user data."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message, ReplyKeyboardRemove

from dressmewell.bot_service.context import BotContext


def setup(router: Router, context: BotContext) -> None:
    """Register /reset handler."""

    @router.message(Command("reset"))
    async def handle_reset(message: Message) -> None:
        user_id = str(message.from_user.id)
        context.scans.abandon(user_id)
        await context.storage.reset_user(user_id)
        await message.answer(
            "All your data has been cleared. Use /bodyscan to start again.",
            reply_markup=ReplyKeyboardRemove(),
        )
