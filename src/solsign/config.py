"""Application configuration using pydantic-settings.

Controls seed phrase derivation defaults and wallet provider options.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SOLANA_DERIVATION_PATH = "m/44'/501'/0'/0'"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Seed phrase derivation
    # ======================
    default_derivation_path: str = Field(
        default=SOLANA_DERIVATION_PATH,
        description="HD path used when the raw seed cannot be used directly",
    )
    prefer_standard_path: bool = Field(
        default=False,
        description="Try the HD path before the raw seed (wallet-standard order)",
    )
    bip39_language: str = Field(default="english", description="BIP39 wordlist language")

    # ======================
    # Wallet providers
    # ======================
    phantom_encoding_hint: str = Field(
        default="utf8", description="Encoding hint passed to Phantom signMessage"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings as a plain dict for display."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "derivation": {
                "default_path": self.default_derivation_path,
                "prefer_standard_path": self.prefer_standard_path,
                "language": self.bip39_language,
            },
            "wallets": {
                "phantom_encoding_hint": self.phantom_encoding_hint,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
