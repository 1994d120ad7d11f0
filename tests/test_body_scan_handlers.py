"""Tests for the body scan bot handler helpers."""

from __future__ import annotations

import asyncio

import pytest
import pytest_mock

from dressmewell.body_shape import BodyShape, BodyShapeClassifier, BodyShapeWorkflow, ScanStep
from dressmewell.bot_service.handlers.body_scan import capture_photo, confirm_shape, run_step_action


def _ranking(image, candidate_labels):
    return [{"label": "pear body shape", "score": 0.8}]


@pytest.fixture()
def message(mocker: pytest_mock.MockerFixture):
    msg = mocker.Mock()
    msg.answer = mocker.AsyncMock()
    return msg


@pytest.fixture()
def workflow(mocker: pytest_mock.MockerFixture) -> BodyShapeWorkflow:
    profiles = mocker.AsyncMock()
    return BodyShapeWorkflow(BodyShapeClassifier(_ranking), profiles, "42")


def _last_text(message) -> str:
    return message.answer.await_args.args[0]


@pytest.mark.asyncio
async def test_capture_after_cancel_replies_instead_of_raising(message, workflow) -> None:
    workflow.start()
    workflow.advance()
    workflow.advance()
    workflow.abandon()

    await capture_photo(message, workflow, b"photo")

    assert "No body scan in progress" in _last_text(message)


@pytest.mark.asyncio
async def test_capture_shows_result(message, workflow) -> None:
    workflow.start()
    workflow.advance()
    workflow.advance()

    await capture_photo(message, workflow, b"photo")

    assert workflow.session.step == ScanStep.RESULT
    assert "Pear" in _last_text(message)


@pytest.mark.asyncio
async def test_capture_failure_offers_retry(message, mocker: pytest_mock.MockerFixture) -> None:
    backend = mocker.Mock(side_effect=RuntimeError("no model"))
    workflow = BodyShapeWorkflow(BodyShapeClassifier(backend), mocker.AsyncMock(), "42")
    workflow.start()
    workflow.advance()
    workflow.advance()

    await capture_photo(message, workflow, b"photo")

    assert "try again" in _last_text(message)
    assert workflow.session.step == ScanStep.CAPTURING


@pytest.mark.asyncio
async def test_step_action_in_wrong_step_replies(message, workflow) -> None:
    workflow.start()
    workflow.advance()
    workflow.advance()

    await run_step_action(message, workflow, workflow.advance)

    assert "capturing" in _last_text(message)
    assert workflow.session.step == ScanStep.CAPTURING


@pytest.mark.asyncio
async def test_step_action_without_session_replies(message, workflow) -> None:
    await run_step_action(message, workflow, workflow.back)

    assert "No body scan in progress" in _last_text(message)


@pytest.mark.asyncio
async def test_double_confirm_saves_once(message, mocker: pytest_mock.MockerFixture) -> None:
    release = asyncio.Event()

    async def slow_write(user_id, shape):
        await release.wait()

    profiles = mocker.AsyncMock()
    profiles.update_body_shape = mocker.AsyncMock(side_effect=slow_write)
    workflow = BodyShapeWorkflow(BodyShapeClassifier(_ranking), profiles, "42")
    workflow.start()
    workflow.skip_to_manual()
    workflow.select(BodyShape.APPLE)

    first = asyncio.create_task(confirm_shape(message, workflow))
    await asyncio.sleep(0)
    await confirm_shape(message, workflow)
    assert "being saved" in _last_text(message)

    release.set()
    await first

    profiles.update_body_shape.assert_awaited_once_with("42", "apple")
    assert "Saved!" in _last_text(message)
