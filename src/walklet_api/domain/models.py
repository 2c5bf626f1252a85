"""Domain models for Walklet users."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class EncryptedKeyBundle:
    """AES-GCM encrypted private key, all fields base64 encoded."""

    ciphertext: str
    iv: str
    tag: str
    alg: str = "aes-256-gcm"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    email: str
    created_at: datetime
    password_hash: str | None = None
    username: str | None = None
    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    wallet_address: str | None = None
    wallet_key: EncryptedKeyBundle | None = None
    daily_step_goal: int | None = None
    last_reward_nonce: int = 0


def normalize_email(email: str) -> str:
    """Return the canonical lower-cased form of an email."""
    return email.strip().lower()


def normalize_username(username: str) -> str:
    """Return the canonical lower-cased form of a username."""
    return " ".join(username.strip().split()).lower()
