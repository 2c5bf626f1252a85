"""Walk reward vouchers: nonce sequencing, voucher building and issuance."""

import asyncio
import logging
import math
import re
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from eth_abi.packed import encode_packed
from eth_utils import keccak, to_checksum_address

from walklet_api.domain.errors import NonceError, SigningError, ValidationError
from walklet_api.domain.rewards import (
    REWARD_DOMAIN_TAG,
    TOKEN_DECIMALS,
    RewardSettings,
    VoucherDraft,
    WalkVoucher,
)
from walklet_api.services.locks import KeyedLocks
from walklet_api.services.users import UserRepository

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
# Largest value a uint256 voucher field can carry.
MAX_UINT256 = 2**256 - 1
_DIGEST_TYPES = ["string", "address", "uint256", "address", "uint256", "uint256"]

_logger = logging.getLogger(__name__)


class RewardNonceRepository(Protocol):
    """Persistence interface for the per-user reward nonce."""

    def get_reward_nonce(self, user_id: UUID) -> int | None:
        """Return the last issued nonce (0 when unset), or None for no user."""

    def compare_and_set_reward_nonce(
        self, user_id: UUID, expected: int, new: int
    ) -> bool:
        """Write ``new`` only if the stored nonce still equals ``expected``."""


class VoucherSigner(Protocol):
    """Holds the server signing key."""

    @property
    def address(self) -> str:
        """Public address of the signing key."""

    def sign(self, digest: bytes) -> str:
        """Return a 0x-prefixed recoverable signature over a 32-byte digest."""


def is_valid_address(value: object) -> bool:
    """Return True for strings of the form 0x + 40 hex characters."""
    return isinstance(value, str) and _ADDRESS_PATTERN.fullmatch(value) is not None


def build_voucher(steps: object, steps_per_token: int, recipient: str) -> VoucherDraft:
    """Convert a step count to whole tokens for a recipient."""
    if (
        isinstance(steps, bool)
        or not isinstance(steps, int | float)
        or (isinstance(steps, float) and not math.isfinite(steps))
        or steps < 0
    ):
        raise ValidationError("steps must be a non-negative finite number")
    if not is_valid_address(recipient):
        raise ValidationError("Recipient must be a 0x-prefixed 40-hex-character address")

    token_amount = int(steps // steps_per_token)
    if token_amount <= 0:
        raise ValidationError(
            f"Not enough steps: at least {steps_per_token} steps are required "
            "to earn 1 STPC"
        )
    amount = token_amount * 10**TOKEN_DECIMALS
    if amount > MAX_UINT256:
        raise ValidationError("steps is too large to fit in a voucher")
    return VoucherDraft(
        recipient=to_checksum_address(recipient),
        token_amount=token_amount,
        amount=amount,
    )


def voucher_digest(
    contract_address: str, chain_id: int, recipient: str, amount: int, nonce: int
) -> bytes:
    """Keccak-256 of the voucher fields packed like Solidity abi.encodePacked."""
    packed = encode_packed(
        _DIGEST_TYPES,
        [
            REWARD_DOMAIN_TAG,
            to_checksum_address(contract_address),
            chain_id,
            to_checksum_address(recipient),
            amount,
            nonce,
        ],
    )
    return keccak(packed)


@dataclass
class NonceSequencer:
    """Hands out strictly increasing reward nonces per user."""

    repository: RewardNonceRepository
    _locks: KeyedLocks = field(default_factory=KeyedLocks, init=False, repr=False)

    def lock_for(self, user_id: UUID) -> AbstractAsyncContextManager[None]:
        """Return the in-process lock serializing issuance for a user."""
        return self._locks.hold(user_id)

    async def next_nonce(self, user_id: UUID) -> int:
        """Advance the user's nonce by one and return the new value."""
        try:
            previous = await asyncio.to_thread(
                self.repository.get_reward_nonce, user_id
            )
        except Exception as exc:
            raise NonceError(f"Failed to read reward nonce: {exc}") from exc
        if previous is None:
            raise NonceError("Failed to read reward nonce: user not found")

        next_value = previous + 1
        try:
            updated = await asyncio.to_thread(
                self.repository.compare_and_set_reward_nonce,
                user_id,
                previous,
                next_value,
            )
        except Exception as exc:
            raise NonceError(f"Failed to update reward nonce: {exc}") from exc
        if not updated:
            raise NonceError("Reward nonce changed concurrently; please retry")
        return next_value


@dataclass
class VoucherIssuer:
    """Builds, sequences and signs walk reward vouchers."""

    settings: RewardSettings
    signer: VoucherSigner
    sequencer: NonceSequencer
    users: UserRepository

    async def issue_walk_voucher(
        self, user_id: UUID, steps: object, recipient_override: object = None
    ) -> WalkVoucher:
        """Return a signed voucher for the tokens earned by ``steps``."""
        recipient = self._resolve_recipient(user_id, recipient_override)
        draft = build_voucher(steps, self.settings.steps_per_token, recipient)

        async with self.sequencer.lock_for(user_id):
            nonce = await self.sequencer.next_nonce(user_id)
            digest = voucher_digest(
                self.settings.contract_address,
                self.settings.chain_id,
                draft.recipient,
                draft.amount,
                nonce,
            )
            try:
                signature = self.signer.sign(digest)
            except SigningError:
                _logger.warning(
                    "Signing failed after nonce bump; nonce %s burned for user %s",
                    nonce,
                    user_id,
                )
                raise

        _logger.info(
            "Issued walk voucher: user=%s nonce=%s stpc=%s to=%s",
            user_id,
            nonce,
            draft.token_amount,
            draft.recipient,
        )
        return WalkVoucher(
            contract_address=self.settings.contract_address,
            chain_id=self.settings.chain_id,
            user=draft.recipient,
            amount=draft.amount,
            nonce=nonce,
            signature=signature,
            stpc=draft.token_amount,
            steps_per_stpc=self.settings.steps_per_token,
        )

    def _resolve_recipient(self, user_id: UUID, override: object) -> str:
        if override is not None:
            if is_valid_address(override):
                return override
            _logger.warning("Ignoring malformed recipient override for %s", user_id)
        user = self.users.get_by_id(user_id)
        if user is not None and is_valid_address(user.wallet_address):
            return user.wallet_address
        raise ValidationError(
            "No valid recipient address: supply 'to' or create a wallet first"
        )


def serialize_voucher(voucher: WalkVoucher) -> dict[str, object]:
    return {
        "contractAddress": voucher.contract_address,
        "chainId": voucher.chain_id,
        "user": voucher.user,
        "amount": str(voucher.amount),
        "nonce": voucher.nonce,
        "signature": voucher.signature,
        "stpc": voucher.stpc,
        "stepsPerStpc": voucher.steps_per_stpc,
    }
