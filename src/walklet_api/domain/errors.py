"""Domain errors surfaced to API callers."""


class WalkletError(RuntimeError):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500


class ValidationError(WalkletError):
    """Raised when caller input is malformed or insufficient."""

    status_code = 400


class AuthError(WalkletError):
    """Raised for missing, invalid or expired credentials."""

    status_code = 401


class NotFoundError(WalkletError):
    """Raised when an entity is missing or not owned by the caller."""

    status_code = 404


class ConflictError(WalkletError):
    """Raised when a uniqueness constraint would be violated."""

    status_code = 409


class LimitExceededError(WalkletError):
    """Raised when a per-user quota is exhausted."""

    status_code = 429


class ConfigurationError(WalkletError):
    """Raised when a feature is used without its required configuration."""


class NonceError(WalkletError):
    """Raised when the reward nonce cannot be read or advanced."""


class SigningError(WalkletError):
    """Raised when the signing primitive fails."""
