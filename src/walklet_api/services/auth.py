"""Authentication: password hashing, session tokens and sign-in flows."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

import bcrypt
import jwt

from walklet_api.domain.errors import (
    AuthError,
    ConfigurationError,
    ConflictError,
    ValidationError,
)
from walklet_api.domain.models import UserRecord, normalize_email, normalize_username
from walklet_api.services.users import UserRepository

MIN_PASSWORD_LENGTH = 8


class GoogleTokenVerifier(Protocol):
    """Interface for verifying Google Sign-In ID tokens."""

    def verify(self, token: str) -> dict[str, object]:
        """Return verified token claims or raise ValueError."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


@dataclass
class TokenService:
    """Issues and validates HS256 session tokens."""

    secret: str
    expiry_days: int = 7
    algorithm: str = "HS256"

    def create_token(self, user_id: UUID | str, email: str) -> str:
        """Return a signed token with ``sub`` and ``email`` claims."""
        now = datetime.now(tz=UTC)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + timedelta(days=self.expiry_days),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, object]:
        """Return token claims, raising AuthError when invalid or expired."""
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid or expired token") from exc


@dataclass
class AuthService:
    """Registration and sign-in flows backed by the user repository."""

    repository: UserRepository
    tokens: TokenService
    google_verifier: GoogleTokenVerifier | None = None

    def register(
        self, email: str, password: str, username: str | None = None
    ) -> tuple[UserRecord, str]:
        """Create a password account and return it with a session token."""
        normalized_email = normalize_email(email)
        if not normalized_email or "@" not in normalized_email:
            raise ValidationError("A valid email is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if self.repository.get_by_email(normalized_email) is not None:
            raise ConflictError("Email already registered")
        normalized_username = normalize_username(username) if username else None
        if normalized_username and self.repository.get_by_username(
            normalized_username
        ):
            raise ConflictError("Username already taken")

        user = self.repository.create_user(
            normalized_email, hash_password(password), normalized_username or None
        )
        return user, self.tokens.create_token(user.id, user.email)

    def login(self, email: str, password: str) -> tuple[UserRecord, str]:
        """Authenticate with email and password."""
        user = self.repository.get_by_email(normalize_email(email))
        if (
            user is None
            or not user.password_hash
            or not verify_password(password, user.password_hash)
        ):
            raise AuthError("Invalid email or password")
        return user, self.tokens.create_token(user.id, user.email)

    def login_with_google(self, token: str) -> tuple[UserRecord, str]:
        """Authenticate with a Google ID token, creating the user on first use."""
        if self.google_verifier is None:
            raise ConfigurationError("Google sign-in is not configured")
        try:
            claims = self.google_verifier.verify(token)
        except ValueError as exc:
            raise AuthError("Invalid Google token") from exc
        email = claims.get("email")
        if not isinstance(email, str) or not claims.get("email_verified"):
            raise AuthError("Google account email is not verified")

        normalized_email = normalize_email(email)
        user = self.repository.get_by_email(normalized_email)
        if user is None:
            user = self.repository.create_user(normalized_email, None, None)
        return user, self.tokens.create_token(user.id, user.email)

    def authenticate(self, token: str) -> UserRecord:
        """Resolve a bearer token to its user."""
        claims = self.tokens.decode_token(token)
        try:
            user_id = UUID(str(claims.get("sub")))
        except ValueError as exc:
            raise AuthError("Invalid or expired token") from exc
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise AuthError("User not found")
        return user
