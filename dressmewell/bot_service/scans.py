"""Per-user registry of scan workflows."""

from __future__ import annotations

from dressmewell.body_shape import BodyShapeClassifier, BodyShapeWorkflow
from dressmewell.body_shape.workflow import ProfileWriter


class ScanRegistry:
    """Keeps one workflow per user; the workflow is reused for every new scan."""

    def __init__(self, classifier: BodyShapeClassifier, profiles: ProfileWriter) -> None:
        self._classifier = classifier
        self._profiles = profiles
        self._workflows: dict[str, BodyShapeWorkflow] = {}

    def get(self, user_id: str) -> BodyShapeWorkflow:
        """Return the user's workflow, creating it on first access."""

        workflow = self._workflows.get(user_id)
        if workflow is None:
            workflow = BodyShapeWorkflow(self._classifier, self._profiles, user_id)
            self._workflows[user_id] = workflow
        return workflow

    def abandon(self, user_id: str) -> None:
        """Abandon any active scan for the user."""

        workflow = self._workflows.get(user_id)
        if workflow is not None:
            workflow.abandon()
