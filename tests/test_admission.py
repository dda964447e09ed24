"""Tests for memory admission control in service mode."""

import asyncio
import threading

import pytest

from scryptwallet.errors import AdmissionRejectedError, InvalidParameterError, ResourceLimitExceededError
from scryptwallet.kdf import ScryptParams
from scryptwallet.pipeline import generate_wallet
from scryptwallet.utils.admission import DerivationAdmission, generate_wallet_async

FAST_EXPONENT = 4


class TestDerivationAdmission:
    """Tests for the admission controller."""

    @pytest.mark.asyncio
    async def test_reserve_and_release(self):
        """Memory is held inside the context and released after."""
        admission = DerivationAdmission(ceiling=1000)

        async with admission.reserve(600):
            assert admission.in_use == 600
            assert admission.active == 1

        assert admission.in_use == 0
        assert admission.active == 0

    @pytest.mark.asyncio
    async def test_rejects_over_ceiling(self):
        """A request that does not fit is rejected immediately."""
        admission = DerivationAdmission(ceiling=1000)

        async with admission.reserve(600):
            with pytest.raises(AdmissionRejectedError) as exc_info:
                async with admission.reserve(500):
                    pass

            assert exc_info.value.required == 500
            assert exc_info.value.limit == 400
            assert admission.in_use == 600

    @pytest.mark.asyncio
    async def test_rejection_is_a_resource_limit(self):
        """Admission rejection is a kind of ResourceLimitExceeded."""
        admission = DerivationAdmission(ceiling=10)

        with pytest.raises(ResourceLimitExceededError):
            async with admission.reserve(11):
                pass

    @pytest.mark.asyncio
    async def test_released_on_error(self):
        """The reservation is returned when the body raises."""
        admission = DerivationAdmission(ceiling=1000)

        with pytest.raises(RuntimeError):
            async with admission.reserve(700):
                raise RuntimeError("boom")

        assert admission.in_use == 0

    @pytest.mark.asyncio
    async def test_fits_exactly(self):
        """Requests up to the ceiling together are admitted."""
        admission = DerivationAdmission(ceiling=1000)

        async with admission.reserve(400):
            async with admission.reserve(600):
                assert admission.in_use == 1000

    def test_default_ceiling_from_settings(self, configure):
        """Ceiling defaults to ADMISSION_MEMORY_CEILING."""
        configure(admission_memory_ceiling=12345)
        assert DerivationAdmission().ceiling == 12345


class TestGenerateWalletAsync:
    """Tests for admission-controlled async generation."""

    @pytest.mark.asyncio
    async def test_matches_sync_result(self, factors):
        """Async generation returns the same account as the sync pipeline."""
        admission = DerivationAdmission(ceiling=64 * 1024 * 1024)

        result = await generate_wallet_async(admission, *factors, FAST_EXPONENT, chain="SOL")

        assert result.account == generate_wallet(*factors, FAST_EXPONENT, chain="SOL").account
        assert admission.in_use == 0

    @pytest.mark.asyncio
    async def test_concurrent_requests_within_ceiling(self, factors):
        """Requests that fit together all run."""
        memory = ScryptParams.from_exponent(FAST_EXPONENT).memory
        admission = DerivationAdmission(ceiling=memory * 3)

        results = await asyncio.gather(
            generate_wallet_async(admission, *factors, FAST_EXPONENT, chain="EVM"),
            generate_wallet_async(admission, *factors, FAST_EXPONENT, chain="SOL"),
            generate_wallet_async(admission, *factors, FAST_EXPONENT, chain="ETH"),
        )

        assert len(results) == 3
        assert admission.in_use == 0

    @pytest.mark.asyncio
    async def test_concurrent_request_rejected(self, factors):
        """A second request is rejected while the first holds the memory."""
        memory = ScryptParams.from_exponent(FAST_EXPONENT).memory
        admission = DerivationAdmission(ceiling=memory)

        async with admission.reserve(memory, operation="in-flight"):
            with pytest.raises(AdmissionRejectedError):
                await generate_wallet_async(admission, *factors, FAST_EXPONENT)

        result = await generate_wallet_async(admission, *factors, FAST_EXPONENT)
        assert result.account.address.startswith("0x")

    @pytest.mark.asyncio
    async def test_invalid_exponent_not_admitted(self, factors):
        """Parameter errors are raised before reserving memory."""
        admission = DerivationAdmission(ceiling=1000)

        with pytest.raises(InvalidParameterError):
            await generate_wallet_async(admission, *factors, 0)

        assert admission.active == 0

    @pytest.mark.asyncio
    async def test_reservation_held_through_repeated_cancel(self, monkeypatch):
        """Cancelling twice still keeps the memory reserved until the worker ends."""
        started = threading.Event()
        release = threading.Event()

        def slow_generate(*args, **kwargs):
            started.set()
            release.wait(5)
            raise RuntimeError("worker failed after cancel")

        monkeypatch.setattr("scryptwallet.utils.admission.generate_wallet", slow_generate)
        admission = DerivationAdmission(ceiling=64 * 1024 * 1024)
        task = asyncio.create_task(
            generate_wallet_async(admission, b"pw", b"us", b"as", FAST_EXPONENT)
        )
        while not started.is_set():
            await asyncio.sleep(0.01)

        task.cancel()
        await asyncio.sleep(0.01)
        task.cancel()
        await asyncio.sleep(0.01)

        assert not task.done()
        assert admission.in_use == ScryptParams.from_exponent(FAST_EXPONENT).memory

        release.set()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert admission.in_use == 0
        assert admission.active == 0
