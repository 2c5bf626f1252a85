"""Authentication endpoints and the bearer-token dependency."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from walklet_api.api.models import GoogleLoginRequest, LoginRequest, RegisterRequest
from walklet_api.domain.errors import AuthError
from walklet_api.domain.models import UserRecord
from walklet_api.services.users import public_user

if TYPE_CHECKING:
    from walklet_api.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])

_bearer = HTTPBearer(auto_error=False)


def bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Return the raw bearer token or raise when it is missing."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing token")
    return credentials.credentials


async def get_current_user(
    request: Request, token: str = Depends(bearer_token)
) -> UserRecord:
    """Resolve the authenticated user from the Authorization header."""
    container: AppContainer = request.app.state.container
    return container.auth_service.authenticate(token)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, request: Request) -> dict[str, object]:
    """Create a password account."""
    container: AppContainer = request.app.state.container
    user, token = container.auth_service.register(
        body.email, body.password, body.username
    )
    return {"token": token, "user": public_user(user)}


@router.post("/login")
async def login(body: LoginRequest, request: Request) -> dict[str, object]:
    """Sign in with email and password."""
    container: AppContainer = request.app.state.container
    user, token = container.auth_service.login(body.email, body.password)
    return {"token": token, "user": public_user(user)}


@router.post("/google")
async def login_google(body: GoogleLoginRequest, request: Request) -> dict[str, object]:
    """Sign in with a Google ID token."""
    container: AppContainer = request.app.state.container
    user, token = container.auth_service.login_with_google(body.id_token)
    return {"token": token, "user": public_user(user)}


@router.get("/me")
async def me(user: UserRecord = Depends(get_current_user)) -> dict[str, object]:
    """Return the authenticated user."""
    return {"user": public_user(user)}
