"""Development-only endpoints, mounted only when dev mode is on."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from walklet_api.api.auth import bearer_token, get_current_user
from walklet_api.api.models import VoucherWalkRequest
from walklet_api.domain.errors import ConfigurationError
from walklet_api.domain.models import UserRecord
from walklet_api.services.rewards import serialize_voucher

if TYPE_CHECKING:
    from walklet_api.containers import AppContainer

router = APIRouter(tags=["dev"])


@router.get("/debug/token")
async def debug_token(
    request: Request,
    email: str = "test@example.com",
    sub: str = "debug-user",
) -> dict[str, str]:
    """Issue a token for exercising the auth flow."""
    container: AppContainer = request.app.state.container
    return {
        "token": container.token_service.create_token(sub, email),
        "note": "Use this token in Authorization header as: Bearer <token>",
    }


@router.get("/debug/protected")
async def debug_protected(
    request: Request, token: str = Depends(bearer_token)
) -> dict[str, object]:
    """Echo the claims of a valid token."""
    container: AppContainer = request.app.state.container
    return {"ok": True, "user": container.token_service.decode_token(token)}


@router.delete("/dev/walks/{session_id}", status_code=status.HTTP_200_OK)
async def delete_walk(
    session_id: UUID,
    request: Request,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Delete one of the caller's walk sessions."""
    container: AppContainer = request.app.state.container
    container.walk_service.delete_owned(user.id, session_id)
    return {"deleted": True, "id": str(session_id)}


@router.post("/dev/rewards/voucher-walk")
async def voucher_walk(
    body: VoucherWalkRequest,
    request: Request,
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    """Issue a signed STPC voucher for a step count."""
    container: AppContainer = request.app.state.container
    if container.voucher_issuer is None:
        raise ConfigurationError("Reward signing is not configured")
    voucher = await container.voucher_issuer.issue_walk_voucher(
        user.id, body.steps, body.to
    )
    return serialize_voucher(voucher)
