"""Handlers that walk the user through a body shape scan."""

from __future__ import annotations

from typing import Any, Callable

from aiogram import F, Router
from aiogram.exceptions import TelegramNetworkError
from aiogram.filters import Command
from aiogram.types import Message, ReplyKeyboardRemove

from dressmewell.body_shape import (
    BodyShapeWorkflow,
    ClassificationUnavailableError,
    InvalidTransitionError,
    ProfileUpdateError,
    ScanStep,
)
from dressmewell.bot_service.context import BotContext
from dressmewell.bot_service.filters import ScanStepFilter
from dressmewell.bot_service.keyboards import (
    BACK,
    CANCEL,
    CONFIRM,
    NEXT,
    SHAPE_BUTTONS,
    SKIP,
    STEP_TEXTS,
    result_text,
    step_keyboard,
)

ACTIVE_STEPS = (
    ScanStep.INTRO,
    ScanStep.INSTRUCTIONS,
    ScanStep.CAPTURING,
    ScanStep.PROCESSING,
    ScanStep.RESULT,
)


def setup(router: Router, context: BotContext) -> None:
    """Register body scan handlers."""

    @router.message(Command("bodyscan"))
    async def handle_bodyscan(message: Message) -> None:
        workflow = context.scans.get(str(message.from_user.id))
        session = workflow.start()
        await _show_step(message, workflow, session.step)

    @router.message(ScanStepFilter(context, *ACTIVE_STEPS), F.text == CANCEL)
    async def handle_cancel(message: Message, workflow: BodyShapeWorkflow) -> None:
        workflow.abandon()
        await message.answer(
            "Body scan cancelled. Your profile was not changed.",
            reply_markup=ReplyKeyboardRemove(),
        )

    @router.message(ScanStepFilter(context, ScanStep.INTRO, ScanStep.INSTRUCTIONS), F.text == NEXT)
    async def handle_next(message: Message, workflow: BodyShapeWorkflow) -> None:
        await run_step_action(message, workflow, workflow.advance)

    @router.message(
        ScanStepFilter(context, ScanStep.INSTRUCTIONS, ScanStep.CAPTURING, ScanStep.RESULT),
        F.text == BACK,
    )
    async def handle_back(message: Message, workflow: BodyShapeWorkflow) -> None:
        await run_step_action(message, workflow, workflow.back)

    @router.message(
        ScanStepFilter(context, ScanStep.INTRO, ScanStep.INSTRUCTIONS, ScanStep.CAPTURING),
        F.text == SKIP,
    )
    async def handle_skip(message: Message, workflow: BodyShapeWorkflow) -> None:
        await run_step_action(message, workflow, workflow.skip_to_manual)

    @router.message(ScanStepFilter(context, ScanStep.PROCESSING), F.photo)
    async def handle_photo_while_busy(message: Message) -> None:
        # A classification is already running; extra photos are dropped.
        return

    @router.message(ScanStepFilter(context, ScanStep.CAPTURING), F.photo)
    async def handle_photo(message: Message, workflow: BodyShapeWorkflow) -> None:
        file = message.photo[-1]
        try:
            file_info = await message.bot.get_file(file.file_id)
            file_stream = await message.bot.download_file(file_info.file_path)
        except TelegramNetworkError:
            await message.answer("Could not download the photo from Telegram. Please send it again.")
            return

        data = file_stream.read()
        file_stream.close()
        await capture_photo(message, workflow, data)

    @router.message(ScanStepFilter(context, ScanStep.RESULT), F.text.in_(set(SHAPE_BUTTONS)))
    async def handle_shape_choice(message: Message, workflow: BodyShapeWorkflow) -> None:
        shape = SHAPE_BUTTONS[message.text]
        await run_step_action(message, workflow, lambda: workflow.select(shape))

    @router.message(ScanStepFilter(context, ScanStep.RESULT), F.text == CONFIRM)
    async def handle_confirm(message: Message, workflow: BodyShapeWorkflow) -> None:
        await confirm_shape(message, workflow)


async def run_step_action(
    message: Message,
    workflow: BodyShapeWorkflow,
    action: Callable[[], Any],
) -> None:
    """Apply a navigation action and show the step it leads to."""

    try:
        action()
    except InvalidTransitionError as exc:
        await _reply_error(message, workflow, exc)
        return
    await _show_step(message, workflow, workflow.session.step)


async def capture_photo(message: Message, workflow: BodyShapeWorkflow, data: bytes) -> None:
    """Hand a downloaded photo to the workflow and report the outcome."""

    await message.answer(STEP_TEXTS[ScanStep.PROCESSING], reply_markup=ReplyKeyboardRemove())
    try:
        session = await workflow.capture(data)
    except (ClassificationUnavailableError, InvalidTransitionError) as exc:
        await _reply_error(message, workflow, exc)
        return
    if session is None:
        return
    await _show_step(message, workflow, session.step)


async def confirm_shape(message: Message, workflow: BodyShapeWorkflow) -> None:
    """Persist the selected shape, keeping the result step open on failure."""

    try:
        shape = await workflow.confirm()
    except (ProfileUpdateError, InvalidTransitionError) as exc:
        await _reply_error(message, workflow, exc)
        return
    await message.answer(
        f"Saved! Your body shape is {shape.display_name}. "
        "Outfit suggestions will now be tailored to it.",
        reply_markup=ReplyKeyboardRemove(),
    )


async def _reply_error(message: Message, workflow: BodyShapeWorkflow, exc: Exception) -> None:
    session = workflow.session
    markup = step_keyboard(session.step) if session is not None else ReplyKeyboardRemove()
    await message.answer(str(exc), reply_markup=markup)


async def _show_step(message: Message, workflow: BodyShapeWorkflow, step: ScanStep) -> None:
    if step == ScanStep.RESULT:
        text = result_text(workflow.session)
    else:
        text = STEP_TEXTS[step]
    await message.answer(text, reply_markup=step_keyboard(step))
