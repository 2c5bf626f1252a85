"""Domain models for walk sessions."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class WalkSession:
    """One recorded walking interval."""

    id: UUID
    user_id: UUID
    started_at: datetime
    ended_at: datetime
    duration_s: int
    distance_m: float
    steps: int


@dataclass(frozen=True)
class DailyWalkSummary:
    """Walk totals for a single local day."""

    day: date
    sessions: int
    steps: int
    distance_m: float
    duration_s: int
    daily_step_goal: int | None

    @property
    def goal_reached(self) -> bool:
        return self.daily_step_goal is not None and self.steps >= self.daily_step_goal
