"""User-related business logic."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from walklet_api.domain.errors import ConflictError, NotFoundError
from walklet_api.domain.models import (
    EncryptedKeyBundle,
    UserRecord,
    normalize_username,
)

_PROFILE_FIELDS = {"username", "age", "weight_kg", "height_cm", "daily_step_goal"}


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for a normalized email, if present."""

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user for a normalized username, if present."""

    def create_user(
        self, email: str, password_hash: str | None, username: str | None
    ) -> UserRecord:
        """Create and return a new user record."""

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Apply profile changes and return the updated user."""

    def set_wallet(
        self, user_id: UUID, address: str, bundle: EncryptedKeyBundle
    ) -> None:
        """Store the wallet address and encrypted key together."""


@dataclass
class UserService:
    """Application service for user profile actions."""

    repository: UserRepository

    def get(self, user_id: UUID) -> UserRecord:
        """Return a user or raise when it does not exist."""
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Update editable profile fields, enforcing username uniqueness."""
        current = self.get(user_id)
        updates = {key: value for key, value in changes.items() if key in _PROFILE_FIELDS}
        username = updates.get("username")
        if isinstance(username, str):
            normalized = normalize_username(username)
            if not normalized:
                updates["username"] = None
            else:
                owner = self.repository.get_by_username(normalized)
                if owner is not None and owner.id != current.id:
                    raise ConflictError("Username already taken")
                updates["username"] = normalized
        if not updates:
            return current
        return self.repository.update_profile(user_id, updates)


def public_user(user: UserRecord) -> dict[str, object]:
    """Serialize a user without credentials or key material."""
    return {
        "id": str(user.id),
        "email": user.email,
        "username": user.username,
        "age": user.age,
        "weight_kg": user.weight_kg,
        "height_cm": user.height_cm,
        "daily_step_goal": user.daily_step_goal,
        "wallet_address": user.wallet_address,
        "created_at": user.created_at.isoformat(),
    }
