"""Profile and custodial wallet endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from walklet_api.api.auth import get_current_user
from walklet_api.api.models import ProfileUpdate
from walklet_api.domain.errors import NotFoundError
from walklet_api.domain.models import UserRecord
from walklet_api.services.users import public_user

if TYPE_CHECKING:
    from walklet_api.containers import AppContainer

router = APIRouter(prefix="/me", tags=["users"])


@router.get("")
async def get_profile(user: UserRecord = Depends(get_current_user)) -> dict[str, object]:
    """Return the caller's profile."""
    return {"user": public_user(user)}


@router.patch("")
async def update_profile(
    body: ProfileUpdate,
    request: Request,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Update the caller's profile fields."""
    container: AppContainer = request.app.state.container
    updated = container.user_service.update_profile(
        user.id, body.model_dump(exclude_unset=True)
    )
    return {"user": public_user(updated)}


@router.get("/wallet")
async def get_wallet(user: UserRecord = Depends(get_current_user)) -> dict[str, str]:
    """Return the caller's custodial wallet address."""
    if not user.wallet_address:
        raise NotFoundError("No wallet for this user")
    return {"address": user.wallet_address}


@router.post("/wallet", status_code=status.HTTP_201_CREATED)
async def create_wallet(
    request: Request,
    response: Response,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Create the caller's custodial wallet if it does not exist yet."""
    container: AppContainer = request.app.state.container
    address, created = container.wallet_service.ensure_wallet(user.id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return {"address": address, "created": created}
