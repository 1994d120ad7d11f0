"""Start command handler."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message

from dressmewell.body_shape import parse_body_shape
from dressmewell.bot_service.context import BotContext


def setup(router: Router, context: BotContext) -> None:
    """Register /start handler."""

    @router.message(CommandStart())
    async def handle_start(message: Message) -> None:
        profile = await context.storage.load(str(message.from_user.id))
        if profile.body_shape:
            shape = parse_body_shape(profile.body_shape)
            status = f"Your saved body shape is {shape.display_name}. Use /bodyscan to change it."
        else:
            status = "Use /bodyscan to find your body shape and get better outfit suggestions."
        await message.answer(f"Hi! I'm your DressMeWell stylist.\n{status}")
