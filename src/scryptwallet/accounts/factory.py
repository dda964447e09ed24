"""Account materializer factory.

Maps a chain symbol to the materializer for its chain family. A new
materializer is built on every call; nothing derived is cached.
"""

from typing import Callable

from scryptwallet.accounts.base import AccountMaterializer
from scryptwallet.accounts.evm import EVMAccountMaterializer
from scryptwallet.accounts.solana import SolanaAccountMaterializer
from scryptwallet.errors import InvalidParameterError

# Chain to materializer mapping
MATERIALIZERS: dict[str, Callable[[], AccountMaterializer]] = {
    "EVM": EVMAccountMaterializer,
    "ETH": lambda: EVMAccountMaterializer(chain="ETH"),
    "BSC": lambda: EVMAccountMaterializer(chain="BSC"),
    "POLYGON": lambda: EVMAccountMaterializer(chain="POLYGON"),
    "SOL": SolanaAccountMaterializer,
}


def get_supported_chains() -> list[str]:
    """Get list of supported chain symbols."""
    return list(MATERIALIZERS.keys())


def get_materializer(chain: str) -> AccountMaterializer:
    """Get the account materializer for a chain.

    Args:
        chain: Chain symbol (EVM, ETH, SOL, ...)

    Returns:
        AccountMaterializer instance for the chain

    Raises:
        InvalidParameterError: If the chain is not supported
    """
    factory = MATERIALIZERS.get(chain.upper())
    if factory is None:
        raise InvalidParameterError(
            f"Unsupported chain '{chain}'. Expected one of {get_supported_chains()}"
        )
    return factory()
