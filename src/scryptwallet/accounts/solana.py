"""Solana account materializer (Ed25519).

The seed is the Ed25519 signing seed; every 32-byte value is valid.
Address: base58(public_key).
Export:  base58(seed || public_key), the 64-byte keypair format wallets
such as Phantom import.
"""

import logging

import base58
from nacl.signing import SigningKey

from scryptwallet.accounts.base import Account, AccountMaterializer

logger = logging.getLogger(__name__)


class SolanaAccountMaterializer(AccountMaterializer):
    """Solana account from a derived seed."""

    @property
    def chain(self) -> str:
        return "SOL"

    @property
    def curve(self) -> str:
        return "ed25519"

    def materialize(self, seed: bytes) -> Account:
        """Derive the Ed25519 keypair, base58 address and keypair export."""
        seed = self._validate_seed(seed)

        signing_key = SigningKey(seed)
        public_key = bytes(signing_key.verify_key)
        secret_blob = seed + public_key

        address = base58.b58encode(public_key).decode("ascii")

        logger.debug(f"Materialized SOL account {address}")

        return Account(
            chain=self.chain,
            curve=self.curve,
            address=address,
            public_key=public_key,
            private_key=seed,
            export=base58.b58encode(secret_blob).decode("ascii"),
            secret_blob=secret_blob,
        )
