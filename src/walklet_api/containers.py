"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from eth_utils import to_checksum_address
from supabase import create_client

from walklet_api.adapters.eth_voucher_signer import LocalVoucherSigner
from walklet_api.adapters.fdc_client import HttpxFdcClient
from walklet_api.adapters.google_token_verifier import GoogleIdTokenVerifier
from walklet_api.adapters.supabase_meal_repository import SupabaseMealRepository
from walklet_api.adapters.supabase_user_repository import SupabaseUserRepository
from walklet_api.adapters.supabase_walk_repository import SupabaseWalkRepository
from walklet_api.config import Settings
from walklet_api.domain.errors import ConfigurationError
from walklet_api.domain.rewards import RewardSettings
from walklet_api.services.auth import AuthService, TokenService
from walklet_api.services.cache import InMemoryCache
from walklet_api.services.meals import MealService
from walklet_api.services.nutrition import NutritionService
from walklet_api.services.rewards import (
    NonceSequencer,
    RewardNonceRepository,
    VoucherIssuer,
    VoucherSigner,
    is_valid_address,
)
from walklet_api.services.users import UserRepository, UserService
from walklet_api.services.walks import WalkService
from walklet_api.services.wallets import WalletCipher, WalletService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    wallet_service: WalletService
    walk_service: WalkService
    nutrition_service: NutritionService
    meal_service: MealService
    voucher_issuer: VoucherIssuer | None
    close_resources: Callable[[], Awaitable[None]]


def load_reward_settings(settings: Settings) -> RewardSettings:
    """Validate reward-signing configuration."""
    if not is_valid_address(settings.stpc_contract_address):
        raise ConfigurationError("STPC_CONTRACT_ADDRESS must be a 0x-prefixed address")
    if settings.reward_steps_per_stpc < 1:
        raise ConfigurationError("REWARD_STEPS_PER_STPC must be at least 1")
    return RewardSettings(
        chain_id=settings.chain_id,
        contract_address=to_checksum_address(settings.stpc_contract_address),
        steps_per_token=settings.reward_steps_per_stpc,
    )


def build_voucher_issuer(
    settings: Settings,
    users: UserRepository,
    nonces: RewardNonceRepository,
    signer: VoucherSigner | None = None,
) -> VoucherIssuer | None:
    """Return the voucher issuer, or None when rewards are not configured."""
    try:
        reward_settings = load_reward_settings(settings)
        resolved_signer = signer or LocalVoucherSigner.from_private_key(
            settings.reward_signer_private_key
        )
    except ConfigurationError as exc:
        _logger.warning("Reward vouchers disabled: %s", exc)
        return None
    _logger.info(
        "Reward vouchers enabled: chain=%s contract=%s signer=%s",
        reward_settings.chain_id,
        reward_settings.contract_address,
        resolved_signer.address,
    )
    return VoucherIssuer(
        settings=reward_settings,
        signer=resolved_signer,
        sequencer=NonceSequencer(nonces),
        users=users,
    )


def build_wallet_cipher(settings: Settings) -> WalletCipher | None:
    """Return the wallet cipher, or None when no encryption key is configured."""
    try:
        return WalletCipher.from_hex(settings.wallet_encryption_key)
    except ConfigurationError as exc:
        _logger.warning("Wallet creation disabled: %s", exc)
        return None


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    walk_repository = SupabaseWalkRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)

    token_service = TokenService(
        secret=resolved_settings.jwt_secret,
        expiry_days=resolved_settings.jwt_expiry_days,
    )
    google_verifier = (
        GoogleIdTokenVerifier(resolved_settings.google_client_id)
        if resolved_settings.google_client_id
        else None
    )
    auth_service = AuthService(
        repository=user_repository,
        tokens=token_service,
        google_verifier=google_verifier,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    nutrition_service = NutritionService(fdc_client=fdc_client, cache=InMemoryCache())
    meal_service = MealService(
        nutrition_service=nutrition_service,
        repository=meal_repository,
        timezone_name=resolved_settings.local_timezone,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_service=token_service,
        auth_service=auth_service,
        user_service=UserService(user_repository),
        wallet_service=WalletService(
            user_repository, build_wallet_cipher(resolved_settings)
        ),
        walk_service=WalkService(walk_repository),
        nutrition_service=nutrition_service,
        meal_service=meal_service,
        voucher_issuer=build_voucher_issuer(
            resolved_settings, user_repository, user_repository
        ),
        close_resources=close_resources,
    )
