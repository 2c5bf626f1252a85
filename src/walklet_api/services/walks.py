"""Walk session recording and summaries."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from walklet_api.domain.errors import NotFoundError, ValidationError
from walklet_api.domain.walks import DailyWalkSummary, WalkSession

_logger = logging.getLogger(__name__)


class WalkRepository(Protocol):
    """Persistence interface for walk sessions."""

    def insert_if_absent(  # noqa: PLR0913
        self,
        user_id: UUID,
        started_at: datetime,
        ended_at: datetime,
        duration_s: int,
        distance_m: float,
        steps: int,
    ) -> WalkSession | None:
        """Insert a session; return None when (user, start) already exists."""

    def get_by_start(self, user_id: UUID, started_at: datetime) -> WalkSession | None:
        """Return the session a user started at the given instant."""

    def get_session(self, session_id: UUID) -> WalkSession | None:
        """Return a session by id."""

    def list_sessions(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WalkSession]:
        """Return sessions started within a time range."""

    def list_recent(self, user_id: UUID, limit: int) -> list[WalkSession]:
        """Return the most recent sessions, newest first."""

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session row."""


@dataclass
class WalkService:
    """Service for recording and reporting walk sessions."""

    repository: WalkRepository

    def record(  # noqa: PLR0913
        self,
        user_id: UUID,
        started_at: datetime,
        ended_at: datetime,
        duration_s: int,
        distance_m: float,
        steps: int,
    ) -> tuple[WalkSession | None, bool]:
        """Store a session; duplicates of (user, start) are no-ops."""
        started_at = _as_utc(started_at)
        ended_at = _as_utc(ended_at)
        if ended_at < started_at:
            raise ValidationError("end_time must not be before start_time")
        for label, value in (
            ("duration_s", duration_s),
            ("distance_m", distance_m),
            ("steps", steps),
        ):
            if not math.isfinite(value) or value < 0:
                raise ValidationError(f"{label} must be a non-negative number")

        created = self.repository.insert_if_absent(
            user_id, started_at, ended_at, duration_s, distance_m, steps
        )
        if created is not None:
            return created, True
        _logger.info(
            "Duplicate walk ignored: user=%s started_at=%s",
            user_id,
            started_at.isoformat(),
        )
        return self.repository.get_by_start(user_id, started_at), False

    def list_recent(self, user_id: UUID, limit: int = 20) -> list[WalkSession]:
        return self.repository.list_recent(user_id, limit)

    def today_summary(
        self,
        user_id: UUID,
        timezone_name: str,
        daily_step_goal: int | None,
        now: datetime | None = None,
    ) -> DailyWalkSummary:
        """Return totals for the current day in the given timezone."""
        tz = ZoneInfo(timezone_name)
        local_now = (now or datetime.now(tz=UTC)).astimezone(tz)
        start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        sessions = self.repository.list_sessions(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return DailyWalkSummary(
            day=start.date(),
            sessions=len(sessions),
            steps=sum(session.steps for session in sessions),
            distance_m=sum(session.distance_m for session in sessions),
            duration_s=sum(session.duration_s for session in sessions),
            daily_step_goal=daily_step_goal,
        )

    def delete_owned(self, user_id: UUID, session_id: UUID) -> None:
        """Delete a session after verifying the caller owns it."""
        session = self.repository.get_session(session_id)
        if session is None or session.user_id != user_id:
            raise NotFoundError("Walk session not found")
        self.repository.delete_session(session_id)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def serialize_walk(session: WalkSession) -> dict[str, object]:
    return {
        "id": str(session.id),
        "start_time": session.started_at.isoformat(),
        "end_time": session.ended_at.isoformat(),
        "duration_s": session.duration_s,
        "distance_m": session.distance_m,
        "steps": session.steps,
    }
