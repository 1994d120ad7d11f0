"""Zero-shot body shape classification with result-shape normalisation."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Protocol, Sequence, Union

from PIL import Image

from dressmewell.body_shape.shapes import FALLBACK_SHAPE, LABEL_SUFFIX, MODEL_LABELS

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, str]


class ClassificationBackend(Protocol):
    """Black-box zero-shot image classifier: image plus labels in, ranked scores out."""

    def __call__(self, image: ImageInput, candidate_labels: list[str]) -> Any:
        ...


@dataclass(frozen=True, slots=True)
class Prediction:
    """Single label/score pair extracted from a classifier response."""

    label: str
    score: float | None = None


@dataclass(frozen=True, slots=True)
class FlatRanking:
    """Ranked list of predictions for one image."""

    items: Sequence[Any]


@dataclass(frozen=True, slots=True)
class NestedRanking:
    """One ranked list per input image."""

    rankings: Sequence[Sequence[Any]]


@dataclass(frozen=True, slots=True)
class SinglePrediction:
    """Bare prediction object without a wrapping list."""

    item: Any


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """Anything the backend returned that matches none of the known layouts."""

    raw: Any


ResultShape = Union[FlatRanking, NestedRanking, SinglePrediction, Unrecognized]


def detect_result_shape(raw: Any) -> ResultShape:
    """Tag a raw backend response with the layout it uses."""

    if isinstance(raw, (list, tuple)):
        if raw and isinstance(raw[0], (list, tuple)):
            return NestedRanking(raw)
        return FlatRanking(raw)
    if isinstance(raw, Mapping) or hasattr(raw, "label"):
        return SinglePrediction(raw)
    return Unrecognized(raw)


def _as_prediction(item: Any) -> Prediction | None:
    if isinstance(item, Mapping):
        label = item.get("label")
        score = item.get("score")
    else:
        label = getattr(item, "label", None)
        score = getattr(item, "score", None)

    if not isinstance(label, str) or not label.strip():
        return None
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        score = None
    return Prediction(label=label, score=float(score) if score is not None else None)


def top_prediction(shape: ResultShape) -> Prediction | None:
    """Return the highest ranked prediction; rankings are trusted to be pre-sorted."""

    if isinstance(shape, FlatRanking):
        return _as_prediction(shape.items[0]) if shape.items else None
    if isinstance(shape, NestedRanking):
        first = shape.rankings[0]
        return _as_prediction(first[0]) if first else None
    if isinstance(shape, SinglePrediction):
        return _as_prediction(shape.item)
    if isinstance(shape, Unrecognized):
        return None
    raise TypeError(f"Unhandled result shape: {type(shape).__name__}")


def strip_label_suffix(label: str) -> str:
    """Turn ``"pear body shape"`` into ``"pear"``; other labels pass through trimmed."""

    # Only a trailing suffix is removed, in any case; a suffix mid-label stays.
    cleaned = label.strip()
    if cleaned.lower().endswith(LABEL_SUFFIX):
        cleaned = cleaned[: -len(LABEL_SUFFIX)]
    return cleaned.strip()


class TransformersZeroShotBackend:
    """Hugging Face ``zero-shot-image-classification`` pipeline, loaded on first use."""

    def __init__(self, model: str, device: str = "cpu") -> None:
        self._model = model
        self._device = device
        self._pipeline: Any = None
        self._lock = threading.Lock()

    def _get_pipeline(self) -> Any:
        with self._lock:
            if self._pipeline is None:
                from transformers import pipeline

                logger.info("Loading zero-shot classifier %s on %s.", self._model, self._device)
                self._pipeline = pipeline(
                    "zero-shot-image-classification",
                    model=self._model,
                    device=self._device,
                )
            return self._pipeline

    @staticmethod
    def _prepare_image(image: ImageInput) -> Any:
        if isinstance(image, (bytes, bytearray)):
            with Image.open(BytesIO(image)) as decoded:
                return decoded.convert("RGB")
        return image

    def __call__(self, image: ImageInput, candidate_labels: list[str]) -> Any:
        classifier = self._get_pipeline()
        return classifier(self._prepare_image(image), candidate_labels=candidate_labels)


class BodyShapeClassifier:
    """Reduces any classifier response to a single body shape label.

    Ambiguous or empty responses resolve to ``rectangle`` rather than failing,
    so callers cannot treat that value as proof of a genuine detection.
    Exceptions raised by the backend itself are not caught.
    """

    def __init__(self, backend: ClassificationBackend) -> None:
        self._backend = backend

    def classify_sync(self, image: ImageInput) -> str:
        """Run the backend and return the top label with its suffix removed."""

        raw = self._backend(image, list(MODEL_LABELS))
        prediction = top_prediction(detect_result_shape(raw))
        if prediction is None:
            logger.warning(
                "No usable prediction in classifier response of type %s; using %s.",
                type(raw).__name__,
                FALLBACK_SHAPE.value,
            )
            return FALLBACK_SHAPE.value
        return strip_label_suffix(prediction.label)

    async def classify(self, image: ImageInput) -> str:
        """Async variant that keeps model inference off the event loop."""

        return await asyncio.to_thread(self.classify_sync, image)
