"""Deterministic four-factor wallet generation.

A password, a user salt, an application salt and a cost exponent are
stretched with scrypt into a 32-byte seed, which is then materialized into
a chain-specific account (EVM secp256k1 or Solana Ed25519).
"""

from scryptwallet.errors import (
    InvalidKeyMaterialError,
    InvalidParameterError,
    ResourceLimitExceededError,
    WalletError,
)
from scryptwallet.kdf import ScryptParams, combine_salts, derive_seed
from scryptwallet.pipeline import WalletResult, generate_wallet

__version__ = "1.0.0"

__all__ = [
    "ScryptParams",
    "WalletResult",
    "WalletError",
    "InvalidParameterError",
    "ResourceLimitExceededError",
    "InvalidKeyMaterialError",
    "combine_salts",
    "derive_seed",
    "generate_wallet",
]
