"""Salt combination and scrypt seed derivation.

combined_salt = SHA256(user_salt || application_salt)
seed          = scrypt(password, combined_salt, N=2^exponent, r=8, p=1, dkLen=32)

The byte layout is fixed: wallets generated earlier can only be recovered
if the salts are concatenated in this order, with no delimiter, and the
inputs are passed through unmodified.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Optional

from scryptwallet.config import SCRYPT_MAXMEM_LIMIT, get_settings
from scryptwallet.errors import InvalidParameterError, ResourceLimitExceededError

logger = logging.getLogger(__name__)

SALT_LENGTH = 32
SEED_LENGTH = 32

SCRYPT_R = 8  # block size
SCRYPT_P = 1  # parallelization

# scrypt requires N < 2^(128 * r / 8)
MAX_COST_EXPONENT = 16 * SCRYPT_R - 1


def require_bytes(name: str, value: bytes) -> bytes:
    """Accept only bytes-like input; bytes(int) would silently mean zero bytes."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like, got {type(value).__name__}")
    return bytes(value)


def combine_salts(user_salt: bytes, application_salt: bytes) -> bytes:
    """Merge the user and application salts into one 32-byte salt.

    Either salt may be empty; whether that is acceptable is decided by the
    caller before this point.

    Args:
        user_salt: User-chosen salt bytes
        application_salt: Application salt bytes

    Returns:
        SHA-256 digest of user_salt followed by application_salt

    Raises:
        TypeError: If either salt is not bytes-like
    """
    data = require_bytes("user_salt", user_salt) + require_bytes("application_salt", application_salt)
    return hashlib.sha256(data).digest()


def required_memory(n: int, r: int = SCRYPT_R, p: int = SCRYPT_P) -> int:
    """Memory (bytes) scrypt needs for the given parameters.

    Matches the bound OpenSSL checks against maxmem: the V array of
    128 * r * (N + 2) bytes plus the B array of 128 * r * p bytes.
    """
    return 128 * r * (n + 2) + 128 * r * p


@dataclass(frozen=True)
class ScryptParams:
    """scrypt cost parameters. Only N varies with user input."""

    n: int
    r: int = SCRYPT_R
    p: int = SCRYPT_P
    dklen: int = SEED_LENGTH

    @classmethod
    def from_exponent(cls, cost_exponent: int) -> "ScryptParams":
        """Build parameters for N = 2^cost_exponent.

        Raises:
            InvalidParameterError: If the exponent is not a positive integer
            ResourceLimitExceededError: If N would exceed what scrypt allows
        """
        if isinstance(cost_exponent, bool) or not isinstance(cost_exponent, int):
            raise InvalidParameterError(
                f"Cost exponent must be an integer, got {type(cost_exponent).__name__}"
            )
        if cost_exponent <= 0:
            raise InvalidParameterError(
                f"Cost exponent must be a positive integer, got {cost_exponent}"
            )
        if cost_exponent > MAX_COST_EXPONENT:
            raise ResourceLimitExceededError(
                f"Cost exponent {cost_exponent} is above the scrypt maximum of {MAX_COST_EXPONENT}"
            )
        return cls(n=2**cost_exponent)

    @property
    def memory(self) -> int:
        """Memory bound for these parameters in bytes."""
        return required_memory(self.n, self.r, self.p)

    def check_memory(self, limit: int) -> None:
        """Fail if the memory bound exceeds the limit.

        Raises:
            ResourceLimitExceededError: If more than ``limit`` bytes are needed
        """
        if self.memory > limit:
            raise ResourceLimitExceededError(
                f"scrypt N={self.n}, r={self.r}, p={self.p} needs {self.memory} bytes, "
                f"limit is {limit} bytes",
                required=self.memory,
                limit=limit,
            )


def derive_seed(
    password: bytes,
    salt: bytes,
    cost_exponent: int,
    max_memory: Optional[int] = None,
) -> bytes:
    """Stretch the password into a 32-byte seed with scrypt.

    Args:
        password: Password bytes, used as the scrypt passphrase as-is
        salt: Combined 32-byte salt (see combine_salts)
        cost_exponent: Positive integer; N = 2^cost_exponent
        max_memory: Memory ceiling in bytes (defaults to settings)

    Returns:
        32-byte derived seed

    Raises:
        InvalidParameterError: Bad exponent or salt length
        ResourceLimitExceededError: Memory bound above the ceiling
        TypeError: Password or salt not bytes-like
    """
    password = require_bytes("password", password)
    salt = require_bytes("salt", salt)
    params = ScryptParams.from_exponent(cost_exponent)

    if len(salt) != SALT_LENGTH:
        raise InvalidParameterError(
            f"Combined salt must be {SALT_LENGTH} bytes, got {len(salt)}"
        )

    if max_memory is None:
        max_memory = get_settings().effective_scrypt_max_memory
    limit = min(max_memory, SCRYPT_MAXMEM_LIMIT)
    params.check_memory(limit)

    logger.debug(f"Deriving seed with scrypt N={params.n}, r={params.r}, p={params.p}")
    started = time.monotonic()

    try:
        seed = hashlib.scrypt(
            password,
            salt=salt,
            n=params.n,
            r=params.r,
            p=params.p,
            maxmem=limit,
            dklen=params.dklen,
        )
    except MemoryError as e:
        raise ResourceLimitExceededError(
            f"scrypt N={params.n} could not allocate {params.memory} bytes",
            required=params.memory,
            limit=limit,
        ) from e
    except ValueError as e:
        # Raised by the binding for parameters OpenSSL refuses
        raise InvalidParameterError(f"scrypt rejected N={params.n}: {e}") from e

    logger.debug(f"scrypt N={params.n} finished in {time.monotonic() - started:.2f}s")
    return seed
