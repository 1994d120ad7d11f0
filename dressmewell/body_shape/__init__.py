"""Body shape vocabulary, classifier adapter and scan workflow."""

from .classifier import BodyShapeClassifier, TransformersZeroShotBackend
from .shapes import BodyShape, UnknownBodyShapeError, catalogue, parse_body_shape
from .workflow import (
    BodyShapeWorkflow,
    ClassificationUnavailableError,
    InvalidTransitionError,
    ProfileUpdateError,
    ScanSession,
    ScanStep,
)

__all__ = [
    "BodyShape",
    "BodyShapeClassifier",
    "BodyShapeWorkflow",
    "ClassificationUnavailableError",
    "InvalidTransitionError",
    "ProfileUpdateError",
    "ScanSession",
    "ScanStep",
    "TransformersZeroShotBackend",
    "UnknownBodyShapeError",
    "catalogue",
    "parse_body_shape",
]
