"""Step-by-step body shape scan: intro, instructions, capture, processing, result."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from dressmewell.body_shape.classifier import BodyShapeClassifier, ImageInput
from dressmewell.body_shape.shapes import (
    FALLBACK_SHAPE,
    BodyShape,
    UnknownBodyShapeError,
    parse_body_shape,
)

logger = logging.getLogger(__name__)


class ClassificationUnavailableError(RuntimeError):
    """Raised when the classifier could not produce any answer."""


class ProfileUpdateError(RuntimeError):
    """Raised when the confirmed body shape could not be saved."""


class InvalidTransitionError(RuntimeError):
    """Raised when an action is not allowed in the current scan step."""


class ProfileWriter(Protocol):
    async def update_body_shape(self, user_id: str, shape: BodyShape) -> Any:
        ...


class ScanStep(str, Enum):
    """Steps of a single scan attempt."""

    INTRO = "intro"
    INSTRUCTIONS = "instructions"
    CAPTURING = "capturing"
    PROCESSING = "processing"
    RESULT = "result"
    CONFIRMED = "confirmed"
    ABANDONED = "abandoned"


TERMINAL_STEPS = frozenset({ScanStep.CONFIRMED, ScanStep.ABANDONED})

_FORWARD = {
    ScanStep.INTRO: ScanStep.INSTRUCTIONS,
    ScanStep.INSTRUCTIONS: ScanStep.CAPTURING,
}

_BACKWARD = {
    ScanStep.INSTRUCTIONS: ScanStep.INTRO,
    ScanStep.CAPTURING: ScanStep.INSTRUCTIONS,
    ScanStep.RESULT: ScanStep.CAPTURING,
}


@dataclass(slots=True)
class ScanSession:
    """Transient state of one scan attempt; never persisted."""

    user_id: str
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    step: ScanStep = ScanStep.INTRO
    image: ImageInput | None = None
    detected: BodyShape | None = None
    candidate: BodyShape | None = None
    error: str | None = None
    saving: bool = False


class BodyShapeWorkflow:
    """Drives one user's scan sessions and writes the confirmed shape to the profile."""

    def __init__(
        self,
        classifier: BodyShapeClassifier,
        profiles: ProfileWriter,
        user_id: str,
    ) -> None:
        self._classifier = classifier
        self._profiles = profiles
        self._user_id = user_id
        self._session: ScanSession | None = None

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def session(self) -> ScanSession | None:
        return self._session

    @property
    def busy(self) -> bool:
        return self._session is not None and self._session.step == ScanStep.PROCESSING

    def start(self) -> ScanSession:
        """Open a new session, dropping whatever was in progress."""

        if self._session is not None:
            self.abandon()
        self._session = ScanSession(user_id=self._user_id)
        logger.debug("Scan session %s started for user %s.", self._session.session_id, self._user_id)
        return self._session

    def _require(self, *steps: ScanStep) -> ScanSession:
        session = self._session
        if session is None:
            raise InvalidTransitionError("No body scan in progress. Start a new scan first.")
        if session.saving:
            raise InvalidTransitionError("Your body shape is being saved. Please wait.")
        if steps and session.step not in steps:
            raise InvalidTransitionError(f"Action is not available during the {session.step.value} step.")
        return session

    def advance(self) -> ScanStep:
        session = self._require(*_FORWARD)
        session.step = _FORWARD[session.step]
        return session.step

    def back(self) -> ScanStep:
        session = self._require(*_BACKWARD)
        if session.step == ScanStep.RESULT:
            session.image = None
            session.detected = None
            session.candidate = None
        session.error = None
        session.step = _BACKWARD[session.step]
        return session.step

    def skip_to_manual(self) -> ScanSession:
        """Jump to the result step without scanning so the user can pick a shape."""

        session = self._require(ScanStep.INTRO, ScanStep.INSTRUCTIONS, ScanStep.CAPTURING)
        session.step = ScanStep.RESULT
        return session

    async def capture(self, image: ImageInput) -> ScanSession | None:
        """Classify a captured image.

        Returns ``None`` when the capture was ignored: a classification is
        already running, or the session was replaced while this one was pending.
        """

        if self.busy:
            logger.debug("Ignoring capture for user %s while classification is pending.", self._user_id)
            return None
        session = self._require(ScanStep.CAPTURING)
        session.image = image
        session.error = None
        session.step = ScanStep.PROCESSING
        request_id = session.session_id

        try:
            label = await self._classifier.classify(image)
        except Exception as exc:
            if not self._is_active(request_id):
                logger.info("Discarding failed classification for stale session %s.", request_id)
                return None
            logger.exception("Body shape classification failed for user %s.", self._user_id)
            session.image = None
            session.error = "We could not analyse the photo. Please try again."
            session.step = ScanStep.CAPTURING
            raise ClassificationUnavailableError(session.error) from exc

        if not self._is_active(request_id):
            logger.info("Discarding classification result for stale session %s.", request_id)
            return None

        try:
            shape = parse_body_shape(label)
        except UnknownBodyShapeError:
            logger.warning("Classifier returned unknown label %r; using %s.", label, FALLBACK_SHAPE.value)
            shape = FALLBACK_SHAPE
        session.detected = shape
        session.candidate = shape
        session.step = ScanStep.RESULT
        return session

    def _is_active(self, session_id: str) -> bool:
        session = self._session
        return (
            session is not None
            and session.session_id == session_id
            and session.step == ScanStep.PROCESSING
        )

    def select(self, shape: str | BodyShape) -> BodyShape:
        """Replace the candidate with a shape the user picked by hand."""

        session = self._require(ScanStep.RESULT)
        session.candidate = parse_body_shape(shape)
        session.error = None
        return session.candidate

    async def confirm(self) -> BodyShape:
        """Persist the candidate shape and close the session."""

        session = self._require(ScanStep.RESULT)
        if session.candidate is None:
            raise InvalidTransitionError("Choose a body shape before confirming.")

        shape = session.candidate
        session.saving = True
        try:
            await self._profiles.update_body_shape(self._user_id, shape)
        except Exception as exc:
            logger.error("Failed to save body shape for user %s: %s", self._user_id, exc)
            session.error = "Could not save your body shape. Please try again."
            raise ProfileUpdateError(session.error) from exc
        finally:
            session.saving = False

        session.error = None
        session.step = ScanStep.CONFIRMED
        # A scan started while the write was pending stays active.
        if self._session is session:
            self._session = None
        logger.info("User %s confirmed body shape %s.", self._user_id, shape.value)
        return shape

    def abandon(self) -> None:
        """End the current session without touching the profile."""

        session = self._session
        if session is None:
            return
        if session.step not in TERMINAL_STEPS:
            session.step = ScanStep.ABANDONED
        self._session = None
