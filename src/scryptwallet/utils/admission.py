"""Memory admission control for derivations run inside a service.

scrypt allocates its whole memory bound up front, so concurrent requests
are admitted only while their combined bound stays under a ceiling.
Requests that do not fit are rejected immediately rather than queued.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from scryptwallet.config import get_settings
from scryptwallet.errors import AdmissionRejectedError
from scryptwallet.kdf import ScryptParams
from scryptwallet.pipeline import WalletResult, generate_wallet

logger = logging.getLogger(__name__)


class DerivationAdmission:
    """Tracks memory reserved by in-flight derivations.

    Example:
        admission = DerivationAdmission(ceiling=512 * 1024 * 1024)
        async with admission.reserve(params.memory, operation="evm"):
            # Run the derivation
            ...
    """

    def __init__(self, ceiling: Optional[int] = None):
        """Initialize the controller.

        Args:
            ceiling: Combined memory ceiling in bytes (defaults to settings)
        """
        if ceiling is None:
            ceiling = get_settings().admission_memory_ceiling
        self.ceiling = ceiling
        self._in_use = 0
        self._active = 0

    @property
    def in_use(self) -> int:
        """Bytes currently reserved."""
        return self._in_use

    @property
    def active(self) -> int:
        """Number of reservations currently held."""
        return self._active

    @asynccontextmanager
    async def reserve(self, nbytes: int, operation: str = "derivation") -> AsyncIterator[None]:
        """Reserve memory for the duration of the context.

        Raises:
            AdmissionRejectedError: If the reservation would exceed the ceiling
        """
        # No await between the check and the update, so this is atomic on the loop
        if self._in_use + nbytes > self.ceiling:
            logger.warning(
                f"Rejected {operation}: needs {nbytes} bytes, "
                f"{self._in_use} of {self.ceiling} in use"
            )
            raise AdmissionRejectedError(
                f"Derivation needs {nbytes} bytes but only "
                f"{self.ceiling - self._in_use} of {self.ceiling} are available",
                required=nbytes,
                limit=self.ceiling - self._in_use,
            )

        self._in_use += nbytes
        self._active += 1
        logger.debug(f"Admitted {operation}: {nbytes} bytes, {self._in_use} in use")

        try:
            yield
        finally:
            self._in_use -= nbytes
            self._active -= 1
            logger.debug(f"Released {operation}: {self._in_use} bytes still in use")


async def generate_wallet_async(
    admission: DerivationAdmission,
    password: bytes,
    user_salt: bytes,
    application_salt: bytes,
    cost_exponent: int,
    chain: str = "EVM",
    max_memory: Optional[int] = None,
) -> WalletResult:
    """Run generate_wallet on a worker thread under admission control.

    The event loop stays responsive while scrypt runs. The reservation is
    held until the worker finishes, even if the awaiting task is cancelled.
    """
    params = ScryptParams.from_exponent(cost_exponent)

    async with admission.reserve(params.memory, operation=f"{chain.upper()} N={params.n}"):
        worker = asyncio.ensure_future(
            asyncio.to_thread(
                generate_wallet,
                password,
                user_salt,
                application_salt,
                cost_exponent,
                chain=chain,
                max_memory=max_memory,
            )
        )
        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            # The thread cannot be interrupted; keep its memory reserved until it
            # ends, even if cancellation is requested again while waiting
            while not worker.done():
                try:
                    await asyncio.wait([worker])
                except asyncio.CancelledError:
                    continue
            if not worker.cancelled() and worker.exception() is not None:
                logger.debug(f"Cancelled derivation finished with {type(worker.exception()).__name__}")
            raise
