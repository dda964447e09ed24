"""Wallet generation pipeline.

raw inputs -> combined salt -> derived seed -> account

The salt and seed stages are shared by every chain; only the final
materializer differs. Each call is independent and nothing is cached.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from scryptwallet.accounts.base import Account
from scryptwallet.accounts.factory import get_materializer
from scryptwallet.kdf import ScryptParams, combine_salts, derive_seed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletResult:
    """A generated account plus the cost parameters used to derive it."""

    account: Account
    cost_exponent: int
    params: ScryptParams

    @property
    def n(self) -> int:
        """Effective scrypt cost factor (2^cost_exponent)."""
        return self.params.n


def derive_wallet_seed(
    password: bytes,
    user_salt: bytes,
    application_salt: bytes,
    cost_exponent: int,
    max_memory: Optional[int] = None,
) -> bytes:
    """Derive the 32-byte seed shared by every chain variant."""
    salt = combine_salts(user_salt, application_salt)
    return derive_seed(password, salt, cost_exponent, max_memory=max_memory)


def generate_wallet(
    password: bytes,
    user_salt: bytes,
    application_salt: bytes,
    cost_exponent: int,
    chain: str = "EVM",
    max_memory: Optional[int] = None,
) -> WalletResult:
    """Generate a deterministic wallet from four factors.

    The same four inputs always give the same account; changing any of them
    gives an unrelated one. Inputs are used byte-for-byte.

    Args:
        password: Password bytes
        user_salt: User salt bytes
        application_salt: Application salt bytes
        cost_exponent: Positive integer; scrypt N = 2^cost_exponent
        chain: Target chain symbol (EVM, SOL, ...)
        max_memory: scrypt memory ceiling in bytes (defaults to settings)

    Returns:
        WalletResult with the account and the effective cost parameters

    Raises:
        InvalidParameterError: Bad exponent or unsupported chain
        ResourceLimitExceededError: scrypt memory bound above the ceiling
        InvalidKeyMaterialError: Seed not usable as a private key
    """
    # Resolve the chain first so an unknown chain fails before the slow part
    materializer = get_materializer(chain)
    params = ScryptParams.from_exponent(cost_exponent)

    logger.info(f"Generating {materializer.chain} wallet with scrypt N=2^{cost_exponent}={params.n}")
    started = time.monotonic()

    seed = derive_wallet_seed(
        password, user_salt, application_salt, cost_exponent, max_memory=max_memory
    )
    account = materializer.materialize(seed)

    logger.info(
        f"Generated {account.chain} wallet {account.address} "
        f"in {time.monotonic() - started:.2f}s"
    )

    return WalletResult(account=account, cost_exponent=cost_exponent, params=params)
