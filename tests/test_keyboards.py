"""Tests for bot keyboards and result texts."""

from __future__ import annotations

from aiogram.types import ReplyKeyboardMarkup, ReplyKeyboardRemove

from dressmewell.body_shape import BodyShape, ScanSession, ScanStep
from dressmewell.bot_service.keyboards import CONFIRM, NEXT, SKIP, result_text, step_keyboard


def _texts(markup: ReplyKeyboardMarkup) -> list[str]:
    return [button.text for row in markup.keyboard for button in row]


def test_intro_keyboard_offers_next_and_manual_choice() -> None:
    texts = _texts(step_keyboard(ScanStep.INTRO))

    assert NEXT in texts
    assert SKIP in texts


def test_result_keyboard_lists_every_shape() -> None:
    texts = _texts(step_keyboard(ScanStep.RESULT))

    assert CONFIRM in texts
    assert all(shape.display_name in texts for shape in BodyShape)


def test_processing_removes_keyboard() -> None:
    assert isinstance(step_keyboard(ScanStep.PROCESSING), ReplyKeyboardRemove)


def test_result_text_mentions_override() -> None:
    session = ScanSession(
        user_id="u",
        step=ScanStep.RESULT,
        detected=BodyShape.PEAR,
        candidate=BodyShape.APPLE,
    )

    text = result_text(session)

    assert "Pear" in text
    assert "Selected: Apple" in text
    assert BodyShape.APPLE.description in text


def test_result_text_without_candidate_asks_to_choose() -> None:
    session = ScanSession(user_id="u", step=ScanStep.RESULT)

    assert "Pick the shape" in result_text(session)
