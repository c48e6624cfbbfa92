"""
Configuration management for the Tip Assistant backend.

Loads settings from .env via pydantic-settings.

Notes:
    - controller_account is derived once from CONTROLLER_PRIVATE_KEY and cached
    - validate_production_settings() enforces a signing key and strict CORS in production
"""
import logging
from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

from domain.constants import (
    LUKSO_MAINNET_CHAIN_ID,
    MAINNET_TIP_ASSISTANT_ADDRESS,
    TESTNET_TIP_ASSISTANT_ADDRESS,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── LUKSO RPC ───────────────────────────────────────────────────
    lukso_rpc_url: str = "https://rpc.testnet.lukso.network"
    chain_id: int = 4201
    rpc_timeout_seconds: int = 30
    receipt_timeout_seconds: int = 120

    # ── Controller (signs setDataBatch on the profile) ──────────────
    controller_private_key: str = ""

    # ── Assistant / protocol contracts ──────────────────────────────
    tip_assistant_address_mainnet: str = MAINNET_TIP_ASSISTANT_ADDRESS
    tip_assistant_address_testnet: str = TESTNET_TIP_ASSISTANT_ADDRESS
    uap_protocol_address_mainnet: str = ""
    uap_protocol_address_testnet: str = ""

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── Write endpoint throttling ───────────────────────────────────
    write_rate_limit: int = 10
    write_rate_window_seconds: int = 60

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def is_mainnet(self) -> bool:
        return self.chain_id == LUKSO_MAINNET_CHAIN_ID

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def assistant_address(self) -> str:
        """Tip Assistant deployment for the configured chain."""
        if self.is_mainnet:
            return self.tip_assistant_address_mainnet
        return self.tip_assistant_address_testnet

    @property
    def uap_protocol_address(self) -> str:
        """UAP receiver-delegate address for the configured chain."""
        address = self.uap_protocol_address_mainnet if self.is_mainnet else self.uap_protocol_address_testnet
        if not address:
            network = "MAINNET" if self.is_mainnet else "TESTNET"
            raise ValueError(f"UAP_PROTOCOL_ADDRESS_{network} not set in .env")
        return address

    @cached_property
    def controller_account(self):
        """
        Load the controller account from its private key (computed once, cached).

        The key is held in memory for the process lifetime.
        """
        if not self.controller_private_key:
            raise ValueError("CONTROLLER_PRIVATE_KEY not set in .env")
        from eth_account import Account
        return Account.from_key(self.controller_private_key)

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if not self.controller_private_key:
                raise ValueError(
                    "CONTROLLER_PRIVATE_KEY must be set in production. "
                    "It signs setDataBatch transactions on the profile."
                )
            logger.info("✅ Production settings validated")
        else:
            warnings = []
            if not self.controller_private_key:
                warnings.append("CONTROLLER_PRIVATE_KEY not set (write endpoints will fail)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(f"⚠️  {w}")


# Global settings instance
settings = Settings()
