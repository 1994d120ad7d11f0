"""Custom aiogram filters used by the bot."""

from __future__ import annotations

from typing import Any

from aiogram.filters import BaseFilter
from aiogram.types import Message

from dressmewell.body_shape import ScanStep
from dressmewell.bot_service.context import BotContext


class ScanStepFilter(BaseFilter):
    """Matches messages when the user's active scan is at one of the expected steps."""

    def __init__(self, context: BotContext, *expected: ScanStep) -> None:
        self._context = context
        self._expected = frozenset(expected)

    async def __call__(self, message: Message) -> bool | dict[str, Any]:
        workflow = self._context.scans.get(str(message.from_user.id))
        session = workflow.session
        if session is not None and session.step in self._expected:
            return {"workflow": workflow}
        return False
