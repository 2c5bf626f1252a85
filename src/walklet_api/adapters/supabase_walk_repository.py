"""Supabase-backed walk session repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from walklet_api.domain.walks import WalkSession
from walklet_api.services.walks import WalkRepository

_COLUMNS = "id, user_id, started_at, ended_at, duration_s, distance_m, steps"


@dataclass
class SupabaseWalkRepository(WalkRepository):
    """Supabase implementation for walk sessions."""

    client: Client

    def insert_if_absent(  # noqa: PLR0913
        self,
        user_id: UUID,
        started_at: datetime,
        ended_at: datetime,
        duration_s: int,
        distance_m: float,
        steps: int,
    ) -> WalkSession | None:
        """Insert a session, ignoring conflicts on (user_id, started_at)."""
        response = (
            self.client.table("walk_sessions")
            .upsert(
                {
                    "user_id": str(user_id),
                    "started_at": started_at.isoformat(),
                    "ended_at": ended_at.isoformat(),
                    "duration_s": duration_s,
                    "distance_m": distance_m,
                    "steps": steps,
                },
                on_conflict="user_id,started_at",
                ignore_duplicates=True,
            )
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def get_by_start(self, user_id: UUID, started_at: datetime) -> WalkSession | None:
        """Return the session a user started at the given instant."""
        response = (
            self.client.table("walk_sessions")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("started_at", started_at.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def get_session(self, session_id: UUID) -> WalkSession | None:
        """Return a session by id."""
        response = (
            self.client.table("walk_sessions")
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_sessions(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WalkSession]:
        """Return sessions started in the time range."""
        response = (
            self.client.table("walk_sessions")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("started_at", start.isoformat())
            .lt("started_at", end.isoformat())
            .order("started_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_recent(self, user_id: UUID, limit: int) -> list[WalkSession]:
        """Return recent sessions for a user."""
        response = (
            self.client.table("walk_sessions")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("started_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session row."""
        self.client.table("walk_sessions").delete().eq("id", str(session_id)).execute()


def _parse_row(row: dict[str, object]) -> WalkSession:
    return WalkSession(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        started_at=datetime.fromisoformat(str(row["started_at"])),
        ended_at=datetime.fromisoformat(str(row["ended_at"])),
        duration_s=int(row.get("duration_s", 0)),
        distance_m=float(row.get("distance_m", 0.0)),
        steps=int(row.get("steps", 0)),
    )
