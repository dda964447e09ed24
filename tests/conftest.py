"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment
os.environ["DEBUG"] = "false"
os.environ["REQUIRE_ALL_FACTORS"] = "true"
os.environ.pop("SCRYPT_MAX_MEMORY", None)
os.environ.pop("ADMISSION_MEMORY_CEILING", None)

from scryptwallet.config import get_settings

# Low cost exponent so derivations are fast in tests
FAST_EXPONENT = 4

PASSWORD = b"correct horse"
USER_SALT = b"battery"
APPLICATION_SALT = b"staple"


@pytest.fixture(autouse=True)
def reset_settings():
    """Clear cached settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def configure(monkeypatch):
    """Override settings through environment variables for one test."""

    def _configure(**values):
        for key, value in values.items():
            monkeypatch.setenv(key.upper(), str(value))
        get_settings.cache_clear()
        return get_settings()

    return _configure


@pytest.fixture
def factors() -> tuple[bytes, bytes, bytes]:
    """The reference password, user salt and application salt."""
    return PASSWORD, USER_SALT, APPLICATION_SALT
