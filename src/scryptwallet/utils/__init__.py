"""Utility modules for scryptwallet."""

from scryptwallet.utils.admission import DerivationAdmission, generate_wallet_async

__all__ = ["DerivationAdmission", "generate_wallet_async"]
