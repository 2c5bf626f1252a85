"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from walklet_api.adapters.supabase_meal_repository import SupabaseMealRepository
from walklet_api.adapters.supabase_user_repository import SupabaseUserRepository
from walklet_api.adapters.supabase_walk_repository import SupabaseWalkRepository
from walklet_api.domain.meals import MealType
from walklet_api.domain.models import EncryptedKeyBundle
from walklet_api.domain.nutrition import MacroProfile


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "upsert": [],
            "update": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_options: dict[str, object] = field(default_factory=dict)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def upsert(self, payload, **options) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_options = options
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def or_(self, filters: str) -> "FakeTable":
        self.last_filters.append(("or", filters))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def gte(self, _column: str, _value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self

    def lt(self, _column: str, _value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _user_row(user_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": user_id,
        "email": "walker@example.com",
        "created_at": "2026-03-14T08:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_supabase_user_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = str(uuid4())
    users_table.queue("insert", [_user_row(user_id, last_reward_nonce=0)])
    users_table.queue(
        "select",
        [
            _user_row(
                user_id,
                wallet_address="0x" + "ab" * 20,
                wallet_ciphertext="Y2lwaGVy",
                wallet_iv="aXY=",
                wallet_tag="dGFn",
                last_reward_nonce=None,
            )
        ],
    )

    repository = SupabaseUserRepository(client)
    created = repository.create_user("walker@example.com", "hash", None)
    fetched = repository.get_by_email("walker@example.com")

    assert str(created.id) == user_id
    assert users_table.last_payload["last_reward_nonce"] == 0
    assert fetched is not None
    assert fetched.wallet_key == EncryptedKeyBundle(
        ciphertext="Y2lwaGVy", iv="aXY=", tag="dGFn"
    )
    assert fetched.last_reward_nonce == 0
    assert repository.get_by_username("nobody") is None


def test_supabase_user_repository_create_failure() -> None:
    repository = SupabaseUserRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_user("walker@example.com", None, None)


def test_supabase_user_repository_wallet_update() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = uuid4()

    SupabaseUserRepository(client).set_wallet(
        user_id,
        "0x" + "ab" * 20,
        EncryptedKeyBundle(ciphertext="c", iv="i", tag="t"),
    )

    assert users_table.last_payload == {
        "wallet_address": "0x" + "ab" * 20,
        "wallet_ciphertext": "c",
        "wallet_iv": "i",
        "wallet_tag": "t",
        "wallet_alg": "aes-256-gcm",
    }
    assert ("id", str(user_id)) in users_table.last_filters


def test_supabase_reward_nonce_reads() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    users_table.queue("select", [{"last_reward_nonce": None}])
    users_table.queue("select", [{"last_reward_nonce": 7}])

    repository = SupabaseUserRepository(client)

    assert repository.get_reward_nonce(uuid4()) == 0
    assert repository.get_reward_nonce(uuid4()) == 7
    assert repository.get_reward_nonce(uuid4()) is None


def test_supabase_reward_nonce_compare_and_set() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = uuid4()
    users_table.queue("update", [{"id": str(user_id), "last_reward_nonce": 1}])

    repository = SupabaseUserRepository(client)

    assert repository.compare_and_set_reward_nonce(user_id, 0, 1) is True
    assert users_table.last_payload == {"last_reward_nonce": 1}
    assert (
        "or",
        "last_reward_nonce.is.null,last_reward_nonce.eq.0",
    ) in users_table.last_filters

    users_table.last_filters.clear()
    assert repository.compare_and_set_reward_nonce(user_id, 4, 5) is False
    assert ("last_reward_nonce", 4) in users_table.last_filters


def test_supabase_walk_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("walk_sessions")
    user_id = uuid4()
    row = {
        "id": str(uuid4()),
        "user_id": str(user_id),
        "started_at": "2026-03-14T08:00:00+00:00",
        "ended_at": "2026-03-14T08:30:00+00:00",
        "duration_s": 1800,
        "distance_m": 2400.5,
        "steps": 3100,
    }
    table.queue("upsert", [row])
    table.queue("select", [row])

    repository = SupabaseWalkRepository(client)
    started = datetime(2026, 3, 14, 8, 0, tzinfo=UTC)
    created = repository.insert_if_absent(
        user_id, started, datetime(2026, 3, 14, 8, 30, tzinfo=UTC), 1800, 2400.5, 3100
    )
    duplicate = repository.insert_if_absent(
        user_id, started, datetime(2026, 3, 14, 8, 30, tzinfo=UTC), 1800, 2400.5, 3100
    )
    recent = repository.list_recent(user_id, 5)

    assert created is not None
    assert created.started_at == started
    assert duplicate is None
    assert table.last_options == {
        "on_conflict": "user_id,started_at",
        "ignore_duplicates": True,
    }
    assert [session.steps for session in recent] == [3100]

    repository.delete_session(created.id)
    assert ("id", str(created.id)) in table.last_filters


def test_supabase_meal_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_analyses")
    analysis_id = str(uuid4())
    user_id = uuid4()
    table.queue(
        "insert",
        [
            {
                "id": analysis_id,
                "user_id": str(user_id),
                "meal_type": "dinner",
                "food_name": "pasta",
                "grams": 300,
                "calories": 393,
                "protein_g": 15,
                "carbs_g": 75,
                "fat_g": 3.3,
                "nutrition_source": "fallback",
                "created_at": "2026-03-14T19:00:00+00:00",
            }
        ],
    )

    repository = SupabaseMealRepository(client)
    created = repository.create_analysis(
        user_id=user_id,
        meal_type=MealType.DINNER,
        food_name="pasta",
        grams=300,
        macros=MacroProfile(calories=393, protein_g=15, carbs_g=75, fat_g=3.3),
        nutrition_source="fallback",
        created_at=datetime(2026, 3, 14, 19, 0, tzinfo=UTC),
    )

    assert created.id == UUID(analysis_id)
    assert created.meal_type is MealType.DINNER
    assert table.last_payload["meal_type"] == "dinner"
    assert repository.list_between(
        user_id, datetime(2026, 3, 14, tzinfo=UTC), datetime(2026, 3, 15, tzinfo=UTC)
    ) == []
