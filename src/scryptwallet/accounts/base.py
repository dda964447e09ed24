"""Account materializer base interface.

Each chain family turns the same 32-byte derived seed into its own account:
a keypair, an address, and the secret export string that wallets import.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from scryptwallet.errors import InvalidKeyMaterialError
from scryptwallet.kdf import SEED_LENGTH, require_bytes


def mask_secret(secret: str, keep: int = 3) -> str:
    """Shorten a secret to its first and last few characters for display."""
    if len(secret) <= keep * 2:
        return "..."
    return f"{secret[:keep]}...{secret[-keep:]}"


@dataclass(frozen=True)
class Account:
    """A materialized account.

    Secret fields are excluded from repr so an Account can be logged or
    printed in a traceback without leaking key material.
    """

    chain: str
    curve: str
    address: str
    public_key: bytes
    private_key: bytes = field(repr=False)
    export: str = field(repr=False)  # secret export string handed to the sink
    public_key_compressed: Optional[bytes] = None
    secret_blob: Optional[bytes] = field(default=None, repr=False)

    @property
    def masked_export(self) -> str:
        """Display-only form of the secret export string."""
        return mask_secret(self.export)


class AccountMaterializer(ABC):
    """Abstract base class for account materializers.

    Usage:
        materializer = EVMAccountMaterializer()
        account = materializer.materialize(seed)
    """

    @property
    @abstractmethod
    def chain(self) -> str:
        """Chain symbol (EVM, SOL)."""
        pass

    @property
    @abstractmethod
    def curve(self) -> str:
        """Signature curve (secp256k1, ed25519)."""
        pass

    @abstractmethod
    def materialize(self, seed: bytes) -> Account:
        """Derive the account for a 32-byte seed.

        Args:
            seed: Derived seed from the scrypt engine

        Returns:
            Fully built Account

        Raises:
            InvalidKeyMaterialError: If the seed is not usable as a key
        """
        pass

    def _validate_seed(self, seed: bytes) -> bytes:
        """Check the seed length and return it as bytes."""
        seed = require_bytes("seed", seed)
        if len(seed) != SEED_LENGTH:
            raise InvalidKeyMaterialError(
                f"{self.chain} seed must be {SEED_LENGTH} bytes, got {len(seed)}"
            )
        return seed
