"""secp256k1 voucher signer backed by eth-account."""

import re
from dataclasses import dataclass

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_utils import to_hex

from walklet_api.domain.errors import ConfigurationError, SigningError
from walklet_api.services.rewards import VoucherSigner

_PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_DIGEST_BYTES = 32


@dataclass(frozen=True)
class LocalVoucherSigner(VoucherSigner):
    """Signs voucher digests with the EIP-191 personal-message prefix.

    Matches ``ecrecover(toEthSignedMessageHash(digest), sig)`` on-chain.
    """

    account: LocalAccount

    @classmethod
    def from_private_key(cls, private_key: str | None) -> "LocalVoucherSigner":
        """Load a signer from a 32-byte hex secret."""
        if not private_key or not _PRIVATE_KEY_PATTERN.match(private_key.strip()):
            raise ConfigurationError(
                "REWARD_SIGNER_PRIVATE_KEY must be a 32-byte hex string"
            )
        try:
            account = Account.from_key(private_key.strip())
        except ValueError as exc:
            raise ConfigurationError(f"Invalid REWARD_SIGNER_PRIVATE_KEY: {exc}") from exc
        return cls(account=account)

    @property
    def address(self) -> str:
        return self.account.address

    def sign(self, digest: bytes) -> str:
        """Return a 65-byte r||s||v signature as 0x hex."""
        if len(digest) != _DIGEST_BYTES:
            raise SigningError(f"Digest must be {_DIGEST_BYTES} bytes, got {len(digest)}")
        try:
            signed = self.account.sign_message(encode_defunct(primitive=digest))
        except Exception as exc:
            raise SigningError(str(exc)) from exc
        return to_hex(signed.signature)
