"""Typed errors raised by the derivation core.

The core never terminates the process. Callers decide what a failure means;
the CLI maps each kind to its own exit code via ``exit_code``.

Messages must never include secret material (password, salts, seed, keys).
"""

from typing import Optional


class WalletError(Exception):
    """Base class for all wallet generation failures."""

    exit_code = 1


class InvalidParameterError(WalletError, ValueError):
    """Raised for a missing, zero, negative or non-integer cost exponent,
    or a required secret factor left empty."""

    exit_code = 2


class ResourceLimitExceededError(WalletError):
    """Raised when a derivation would need more memory than allowed."""

    exit_code = 3

    def __init__(self, message: str, required: Optional[int] = None, limit: Optional[int] = None):
        self.required = required
        self.limit = limit
        super().__init__(message)


class AdmissionRejectedError(ResourceLimitExceededError):
    """Raised when concurrent derivations would exceed the combined ceiling."""


class InvalidKeyMaterialError(WalletError):
    """Raised when a derived seed is not a usable private key."""

    exit_code = 4
