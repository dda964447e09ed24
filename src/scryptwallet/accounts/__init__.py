"""Account materializers: turn a derived seed into a chain-specific account."""

from scryptwallet.accounts.base import Account, AccountMaterializer
from scryptwallet.accounts.factory import get_materializer, get_supported_chains

__all__ = [
    "Account",
    "AccountMaterializer",
    "get_materializer",
    "get_supported_chains",
]
