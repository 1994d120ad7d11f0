"""Closed vocabulary of body shapes understood by the stylist."""

from __future__ import annotations

from enum import Enum


class UnknownBodyShapeError(ValueError):
    """Raised when a value cannot be mapped onto a canonical body shape."""


class BodyShape(str, Enum):
    """Canonical body shape identifiers stored on user profiles."""

    HOURGLASS = "hourglass"
    PEAR = "pear"
    APPLE = "apple"
    RECTANGLE = "rectangle"
    INVERTED_TRIANGLE = "inverted-triangle"

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self]


# Order matters: the zero-shot model receives the prompts exactly like this on every call.
MODEL_LABELS: tuple[str, ...] = (
    "hourglass body shape",
    "pear body shape",
    "apple body shape",
    "rectangle body shape",
    "inverted triangle body shape",
)

LABEL_SUFFIX = " body shape"

FALLBACK_SHAPE = BodyShape.RECTANGLE

DISPLAY_NAMES: dict[BodyShape, str] = {
    BodyShape.HOURGLASS: "Hourglass",
    BodyShape.PEAR: "Pear",
    BodyShape.APPLE: "Apple",
    BodyShape.RECTANGLE: "Rectangle",
    BodyShape.INVERTED_TRIANGLE: "Inverted Triangle",
}

DESCRIPTIONS: dict[BodyShape, str] = {
    BodyShape.HOURGLASS: "Bust and hips are balanced with a clearly defined waist.",
    BodyShape.PEAR: "Hips are wider than the shoulders and bust, with a defined waist.",
    BodyShape.APPLE: "Weight sits around the midsection with slimmer hips and legs.",
    BodyShape.RECTANGLE: "Shoulders, waist and hips are roughly the same width.",
    BodyShape.INVERTED_TRIANGLE: "Shoulders are broader than the hips, giving an athletic frame.",
}


def parse_body_shape(value: str | BodyShape) -> BodyShape:
    """Map ids, display names or stripped model labels onto a :class:`BodyShape`."""

    if isinstance(value, BodyShape):
        return value
    if not isinstance(value, str):
        raise UnknownBodyShapeError(f"Unsupported body shape value: {value!r}")

    key = "-".join(value.strip().lower().replace("_", " ").replace("-", " ").split())
    try:
        return BodyShape(key)
    except ValueError as exc:
        raise UnknownBodyShapeError(f"Unknown body shape: {value!r}") from exc


def catalogue() -> list[dict[str, str]]:
    """Return every shape with its display data, in vocabulary order."""

    return [
        {"id": shape.value, "name": shape.display_name, "description": shape.description}
        for shape in BodyShape
    ]
