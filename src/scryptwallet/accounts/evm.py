"""EVM account materializer (secp256k1).

The seed is the private key scalar, read big-endian.
Address: last 20 bytes of keccak256(X || Y), mixed-case checksum encoded.

Works for ETH, BSC, Polygon, and other EVM-compatible chains.
"""

import logging

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_utils import keccak, to_checksum_address

from scryptwallet.accounts.base import Account, AccountMaterializer
from scryptwallet.errors import InvalidKeyMaterialError

logger = logging.getLogger(__name__)


def public_key_to_address(public_key: bytes) -> str:
    """Encode a 64-byte uncompressed public key (X || Y) as a checksum address."""
    if len(public_key) != 64:
        raise ValueError(f"Expected 64-byte public key, got {len(public_key)}")
    return to_checksum_address("0x" + keccak(public_key)[-20:].hex())


class EVMAccountMaterializer(AccountMaterializer):
    """Ethereum-style account from a derived seed.

    Example:
        account = EVMAccountMaterializer().materialize(seed)
        # Account(chain="EVM", address="0x...", ...)
    """

    def __init__(self, chain: str = "EVM"):
        self._chain = chain.upper()

    @property
    def chain(self) -> str:
        return self._chain

    @property
    def curve(self) -> str:
        return "secp256k1"

    def materialize(self, seed: bytes) -> Account:
        """Derive the keypair and checksum address.

        Raises:
            InvalidKeyMaterialError: If the seed is zero or not below the curve order
        """
        seed = self._validate_seed(seed)

        # Never reduce modulo the order: that would produce a different wallet
        scalar = int.from_bytes(seed, "big")
        if not 0 < scalar < SECPK1_N:
            raise InvalidKeyMaterialError(
                "Derived seed is outside the secp256k1 private key range"
            )

        private_key = keys.PrivateKey(seed)
        public_key = private_key.public_key
        address = public_key_to_address(public_key.to_bytes())

        logger.debug(f"Materialized {self._chain} account {address}")

        return Account(
            chain=self._chain,
            curve=self.curve,
            address=address,
            public_key=public_key.to_bytes(),
            private_key=seed,
            export=private_key.to_hex(),
            public_key_compressed=public_key.to_compressed_bytes(),
        )
