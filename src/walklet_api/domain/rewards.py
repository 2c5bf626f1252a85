"""Domain models for reward vouchers."""

from dataclasses import dataclass

REWARD_DOMAIN_TAG = "WALKLET_REWARD"
TOKEN_DECIMALS = 18


@dataclass(frozen=True)
class RewardSettings:
    """Chain and conversion parameters for voucher issuance."""

    chain_id: int
    contract_address: str
    steps_per_token: int


@dataclass(frozen=True)
class VoucherDraft:
    """Amounts computed for a voucher before a nonce is assigned."""

    recipient: str
    token_amount: int
    amount: int


@dataclass(frozen=True)
class WalkVoucher:
    """A signed voucher ready for on-chain redemption."""

    contract_address: str
    chain_id: int
    user: str
    amount: int
    nonce: int
    signature: str
    stpc: int
    steps_per_stpc: int
