"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Largest maxmem accepted by hashlib.scrypt (C int)
SCRYPT_MAXMEM_LIMIT = 2**31 - 1


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Key derivation
    # ======================
    scrypt_max_memory: int = Field(
        default=SCRYPT_MAXMEM_LIMIT,
        gt=0,
        description="Maximum memory (bytes) a single scrypt derivation may use",
    )

    # ======================
    # Service mode
    # ======================
    admission_memory_ceiling: int = Field(
        default=SCRYPT_MAXMEM_LIMIT,
        gt=0,
        description="Combined memory ceiling (bytes) for concurrent derivations",
    )

    # ======================
    # Input policy
    # ======================
    require_all_factors: bool = Field(
        default=True,
        description="Reject an empty password, user salt or application salt",
    )

    # ======================
    # Output
    # ======================
    evm_output_file: str = Field(default="tmp.log", description="Sink for the EVM private key")
    sol_output_file: str = Field(default="tmp-sol.log", description="Sink for the Solana keypair")

    # ======================
    # Logging
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")
    log_level: str = Field(default="INFO", description="Log level when debug is off")

    @property
    def effective_scrypt_max_memory(self) -> int:
        """Per-derivation ceiling, clamped to what the scrypt binding accepts."""
        return min(self.scrypt_max_memory, SCRYPT_MAXMEM_LIMIT)

    def get_output_file(self, chain: str) -> str:
        """Get the secret sink path for a chain."""
        if chain.upper() == "SOL":
            return self.sol_output_file
        return self.evm_output_file

    def get_safe_dict(self) -> dict:
        """Return settings dict for diagnostics (no secrets are configured here)."""
        return {
            "scrypt_max_memory": self.effective_scrypt_max_memory,
            "admission_memory_ceiling": self.admission_memory_ceiling,
            "require_all_factors": self.require_all_factors,
            "output_files": {
                "EVM": self.evm_output_file,
                "SOL": self.sol_output_file,
            },
            "debug": self.debug,
            "log_level": self.log_level,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
