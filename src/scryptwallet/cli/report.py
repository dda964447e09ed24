"""Human-readable report and secret persistence for a generated wallet."""

import logging
import os

from scryptwallet.accounts.base import mask_secret
from scryptwallet.pipeline import WalletResult

logger = logging.getLogger(__name__)

CHAIN_TITLES = {
    "SOL": "Solana Wallet",
}


def render_report(result: WalletResult) -> str:
    """Format the generated wallet for display.

    Only the masked form of the secret export string is included.
    """
    account = result.account
    title = CHAIN_TITLES.get(account.chain, "Wallet")

    lines = [
        "",
        f"Generated {title}:",
        f"Private Key: {mask_secret(account.export)}",
        f"Address: {account.address}",
        "",
        "Security Features:",
        "- Wallet generated using scrypt (memory-hard KDF)",
        "- Four-factor: requires password, userSalt, applicationSalt, AND costParameter",
        "- Same inputs = same wallet (deterministic)",
        "- Different any input = different wallet",
        f"- Cost parameter (N): 2^{result.cost_exponent} = {result.n}",
        "",
        "IMPORTANT: Remember all four inputs!",
        "   You need password, userSalt, applicationSalt, AND costParameter "
        "to regenerate this wallet.",
    ]
    return "\n".join(lines)


def write_secret(path: str, export: str) -> None:
    """Write exactly the secret export string to a file.

    The file is made owner-readable only where the OS supports it, including
    a file that already existed with a wider mode. Existing contents are
    replaced.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    if hasattr(os, "fchmod"):
        try:
            os.fchmod(fd, 0o600)
        except OSError:
            os.close(fd)
            raise
    with os.fdopen(fd, "w", encoding="ascii") as f:
        f.write(export)
    logger.info(f"Wrote secret export to {path}")
