"""Meal photo analysis endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from walklet_api.api.auth import get_current_user
from walklet_api.domain.errors import ValidationError
from walklet_api.domain.meals import MealType
from walklet_api.domain.models import UserRecord
from walklet_api.services.meals import serialize_meal

if TYPE_CHECKING:
    from walklet_api.containers import AppContainer

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("/analyze", status_code=status.HTTP_201_CREATED)
async def analyze_meal(
    request: Request,
    file: UploadFile = File(...),
    meal_type: MealType | None = Form(default=None),
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Score an uploaded meal photo."""
    container: AppContainer = request.app.state.container
    if not (file.content_type or "").startswith("image/"):
        raise ValidationError("Only image uploads are supported")
    contents = await file.read()
    if len(contents) > MAX_UPLOAD_BYTES:
        raise ValidationError("Image is larger than 10 MB")
    analysis = await container.meal_service.analyze(user.id, contents, meal_type)
    return {"analysis": serialize_meal(analysis)}


@router.get("")
async def list_meals(
    request: Request,
    limit: int = 20,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Return the caller's recent meal analyses."""
    container: AppContainer = request.app.state.container
    analyses = container.meal_service.list_recent(user.id, min(max(limit, 1), 100))
    return {"meals": [serialize_meal(analysis) for analysis in analyses]}
