"""Custodial wallet creation and key encryption."""

import base64
import logging
import os
import re
from dataclasses import dataclass
from uuid import UUID

from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from eth_account import Account

from walklet_api.domain.errors import ConfigurationError
from walklet_api.domain.models import EncryptedKeyBundle
from walklet_api.services.users import UserRepository

ALGORITHM = "aes-256-gcm"
_IV_BYTES = 12
_TAG_BYTES = 16
_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletCipher:
    """AES-256-GCM cipher for wallet private keys."""

    key: bytes

    @classmethod
    def from_hex(cls, hex_key: str | None) -> "WalletCipher":
        """Build a cipher from a 64-hex-character key."""
        if not hex_key or not _KEY_PATTERN.match(hex_key):
            raise ConfigurationError(
                "WALLET_ENCRYPTION_KEY must be a 64-hex-character string (32 bytes)."
            )
        return cls(key=bytes.fromhex(hex_key))

    def encrypt_private_key(self, private_key_hex: str) -> EncryptedKeyBundle:
        """Encrypt a hex private key (with or without 0x) under a fresh IV."""
        iv = os.urandom(_IV_BYTES)
        sealed = AESGCM(self.key).encrypt(
            iv, bytes.fromhex(private_key_hex.removeprefix("0x")), None
        )
        ciphertext, tag = sealed[:-_TAG_BYTES], sealed[-_TAG_BYTES:]
        return EncryptedKeyBundle(
            ciphertext=base64.b64encode(ciphertext).decode(),
            iv=base64.b64encode(iv).decode(),
            tag=base64.b64encode(tag).decode(),
            alg=ALGORITHM,
        )

    def decrypt_private_key(self, bundle: EncryptedKeyBundle) -> str:
        """Return the hex private key (without 0x) sealed in a bundle."""
        if bundle.alg != ALGORITHM:
            raise ValueError(f"Unsupported wallet key algorithm: {bundle.alg}")
        sealed = base64.b64decode(bundle.ciphertext) + base64.b64decode(bundle.tag)
        plaintext = AESGCM(self.key).decrypt(base64.b64decode(bundle.iv), sealed, None)
        return plaintext.hex()


def create_and_encrypt_wallet(cipher: WalletCipher) -> tuple[str, EncryptedKeyBundle]:
    """Create a fresh wallet and return its address with the encrypted key."""
    account = Account.create()
    return account.address, cipher.encrypt_private_key(account.key.hex())


@dataclass
class WalletService:
    """Provision one custodial wallet per user."""

    repository: UserRepository
    cipher: WalletCipher | None

    def get_address(self, user_id: UUID) -> str | None:
        user = self.repository.get_by_id(user_id)
        return user.wallet_address if user else None

    def ensure_wallet(self, user_id: UUID) -> tuple[str, bool]:
        """Return the user's wallet address and whether it was just created."""
        existing = self.get_address(user_id)
        if existing:
            return existing, False
        if self.cipher is None:
            raise ConfigurationError("Wallet encryption is not configured")
        address, bundle = create_and_encrypt_wallet(self.cipher)
        self.repository.set_wallet(user_id, address, bundle)
        _logger.info("Created custodial wallet for user %s: %s", user_id, address)
        return address, True
