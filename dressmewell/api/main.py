"""FastAPI entrypoint and HTTP routes.

Run with ``uvicorn dressmewell.api.main:create_app --factory``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from pydantic import BaseModel

from dressmewell import __version__
from dressmewell.body_shape import (
    BodyShapeClassifier,
    TransformersZeroShotBackend,
    UnknownBodyShapeError,
    catalogue,
    parse_body_shape,
)
from dressmewell.body_shape.shapes import FALLBACK_SHAPE
from dressmewell.config.settings import get_settings
from dressmewell.storage import InvalidUserIdError, UserProfile, UserStorage

logger = logging.getLogger(__name__)


class BodyShapeUpdate(BaseModel):
    body_shape: str


class ProfileUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    style_preferences: dict[str, list[str]] | None = None


def create_app(
    storage: UserStorage | None = None,
    classifier: BodyShapeClassifier | None = None,
) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()
    app = FastAPI(
        title="DressMeWell API",
        version=__version__,
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
    )
    app.state.storage = storage or UserStorage(Path(settings.storage_root))
    app.state.classifier = classifier or BodyShapeClassifier(
        TransformersZeroShotBackend(settings.classifier_model, settings.classifier_device),
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/body-shapes", tags=["body-shape"])
    async def list_body_shapes() -> list[dict[str, str]]:
        return catalogue()

    @app.post("/body-shape/analyze", tags=["body-shape"])
    async def analyze_body_shape(request: Request) -> dict[str, str]:
        """Classify raw image bytes without touching any profile."""

        image = await request.body()
        if not image:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image body is empty.")
        try:
            label = await app.state.classifier.classify(image)
        except Exception as exc:
            logger.exception("Body shape analysis failed.")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Body shape analysis is temporarily unavailable.",
            ) from exc
        try:
            shape = parse_body_shape(label)
        except UnknownBodyShapeError:
            shape = FALLBACK_SHAPE
        return {"label": shape.value, "name": shape.display_name, "description": shape.description}

    @app.get("/profiles/{user_id}", tags=["profile"])
    async def get_profile(user_id: str) -> dict[str, Any]:
        profile = await _load_profile(app.state.storage, user_id)
        return asdict(profile)

    @app.patch("/profiles/{user_id}", tags=["profile"])
    async def patch_profile(user_id: str, payload: ProfileUpdate) -> dict[str, Any]:
        """Update name, email and style preferences; omitted fields are left alone."""

        storage: UserStorage = app.state.storage
        profile = await _load_profile(storage, user_id)
        if payload.name is not None or payload.email is not None:
            await storage.update_details(profile, name=payload.name, email=payload.email)
        if payload.style_preferences:
            await storage.update_style_preferences(profile, payload.style_preferences)
        return asdict(profile)

    @app.put("/profiles/{user_id}/body-shape", tags=["profile"])
    async def put_body_shape(user_id: str, payload: BodyShapeUpdate) -> dict[str, Any]:
        try:
            profile = await app.state.storage.update_body_shape(user_id, payload.body_shape)
        except UnknownBodyShapeError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except InvalidUserIdError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return asdict(profile)

    return app


async def _load_profile(storage: UserStorage, user_id: str) -> UserProfile:
    try:
        return await storage.load(user_id)
    except InvalidUserIdError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
