"""Entrypoint for the DressMeWell Telegram bot."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from pathlib import Path

from aiogram import Bot, Dispatcher, Router

from dressmewell.body_shape import BodyShapeClassifier, TransformersZeroShotBackend
from dressmewell.bot_service.context import BotContext
from dressmewell.bot_service.handlers import setup_handlers
from dressmewell.bot_service.scans import ScanRegistry
from dressmewell.config.settings import get_settings
from dressmewell.monitoring.logging import configure_logging
from dressmewell.storage import UserStorage

logger = logging.getLogger(__name__)


async def main() -> None:
    """Initialise dependencies and start polling Telegram."""

    configure_logging()

    settings = get_settings()
    if not settings.bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured.")

    storage = UserStorage(Path(settings.storage_root))
    classifier = BodyShapeClassifier(
        TransformersZeroShotBackend(settings.classifier_model, settings.classifier_device),
    )
    scans = ScanRegistry(classifier, storage)

    bot = Bot(token=settings.bot_token)
    dispatcher = Dispatcher()
    router = Router()
    setup_handlers(router, BotContext(storage=storage, scans=scans))
    dispatcher.include_router(router)

    try:
        logger.info("Starting DressMeWell bot polling.")
        await dispatcher.start_polling(bot)
    finally:
        with suppress(Exception):
            await bot.session.close()


def run() -> None:
    """Console script entrypoint."""

    asyncio.run(main())


if __name__ == "__main__":
    run()
