"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from walklet_api.domain.models import EncryptedKeyBundle, UserRecord
from walklet_api.services.rewards import RewardNonceRepository
from walklet_api.services.users import UserRepository

_USER_COLUMNS = (
    "id, email, password_hash, username, age, weight_kg, height_cm, "
    "wallet_address, wallet_ciphertext, wallet_iv, wallet_tag, wallet_alg, "
    "daily_step_goal, last_reward_nonce, created_at"
)


@dataclass
class SupabaseUserRepository(UserRepository, RewardNonceRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""
        return self._select_one("id", str(user_id))

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for a normalized email, if present."""
        return self._select_one("email", email)

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user for a normalized username, if present."""
        return self._select_one("username", username)

    def create_user(
        self, email: str, password_hash: str | None, username: str | None
    ) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "email": email,
                    "password_hash": password_hash,
                    "username": username,
                    "last_reward_nonce": 0,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Apply profile changes and return the updated row."""
        response = (
            self.client.table("users").update(changes).eq("id", str(user_id)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user profile")
        return _parse_user(response.data[0])

    def set_wallet(
        self, user_id: UUID, address: str, bundle: EncryptedKeyBundle
    ) -> None:
        """Store the wallet address and key bundle in a single update."""
        self.client.table("users").update(
            {
                "wallet_address": address,
                "wallet_ciphertext": bundle.ciphertext,
                "wallet_iv": bundle.iv,
                "wallet_tag": bundle.tag,
                "wallet_alg": bundle.alg,
            }
        ).eq("id", str(user_id)).execute()

    def get_reward_nonce(self, user_id: UUID) -> int | None:
        """Return the last issued nonce, treating NULL as 0."""
        response = (
            self.client.table("users")
            .select("last_reward_nonce")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return int(response.data[0].get("last_reward_nonce") or 0)

    def compare_and_set_reward_nonce(
        self, user_id: UUID, expected: int, new: int
    ) -> bool:
        """Conditionally advance the nonce; False when another writer won."""
        query = (
            self.client.table("users")
            .update({"last_reward_nonce": new})
            .eq("id", str(user_id))
        )
        if expected == 0:
            query = query.or_("last_reward_nonce.is.null,last_reward_nonce.eq.0")
        else:
            query = query.eq("last_reward_nonce", expected)
        response = query.execute()
        return bool(response.data)

    def _select_one(self, column: str, value: str) -> UserRecord | None:
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq(column, value)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None


def _parse_user(row: dict[str, object]) -> UserRecord:
    wallet_key = None
    if row.get("wallet_ciphertext"):
        wallet_key = EncryptedKeyBundle(
            ciphertext=str(row["wallet_ciphertext"]),
            iv=str(row.get("wallet_iv", "")),
            tag=str(row.get("wallet_tag", "")),
            alg=str(row.get("wallet_alg") or "aes-256-gcm"),
        )
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    return UserRecord(
        id=UUID(str(row["id"])),
        email=str(row["email"]),
        created_at=created_at,
        password_hash=row.get("password_hash"),
        username=row.get("username"),
        age=row.get("age"),
        weight_kg=row.get("weight_kg"),
        height_cm=row.get("height_cm"),
        wallet_address=row.get("wallet_address"),
        wallet_key=wallet_key,
        daily_step_goal=row.get("daily_step_goal"),
        last_reward_nonce=int(row.get("last_reward_nonce") or 0),
    )
