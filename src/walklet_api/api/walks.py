"""Walk session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from walklet_api.api.auth import get_current_user
from walklet_api.api.models import WalkCreate
from walklet_api.domain.models import UserRecord
from walklet_api.services.walks import serialize_walk

if TYPE_CHECKING:
    from walklet_api.containers import AppContainer

router = APIRouter(prefix="/walks", tags=["walks"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_walk(
    body: WalkCreate,
    request: Request,
    response: Response,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Record a walk; resubmitting the same start time is a no-op."""
    container: AppContainer = request.app.state.container
    session, created = container.walk_service.record(
        user_id=user.id,
        started_at=body.start_time,
        ended_at=body.end_time,
        duration_s=body.duration_s,
        distance_m=body.distance_m,
        steps=body.steps,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return {
        "created": created,
        "session": serialize_walk(session) if session else None,
    }


@router.get("")
async def list_walks(
    request: Request,
    limit: int = 20,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Return the caller's recent walks."""
    container: AppContainer = request.app.state.container
    sessions = container.walk_service.list_recent(user.id, min(max(limit, 1), 100))
    return {"sessions": [serialize_walk(session) for session in sessions]}


@router.get("/today")
async def today(
    request: Request, user: UserRecord = Depends(get_current_user)
) -> dict[str, object]:
    """Return today's step totals against the caller's goal."""
    container: AppContainer = request.app.state.container
    summary = container.walk_service.today_summary(
        user.id, container.settings.local_timezone, user.daily_step_goal
    )
    return {
        "day": summary.day.isoformat(),
        "sessions": summary.sessions,
        "steps": summary.steps,
        "distance_m": summary.distance_m,
        "duration_s": summary.duration_s,
        "daily_step_goal": summary.daily_step_goal,
        "goal_reached": summary.goal_reached,
    }
