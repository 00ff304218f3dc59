"""Core configuration for solverify."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SOLVERIFY_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # ── Block explorer ───────────────────────────────────────────────────
    etherscan_api_key: str = ""
    explorer_api_url: str = "https://api.etherscan.io/v2/api"
    default_chain: str = "ethereum"
    http_timeout_seconds: float = 30.0

    # ── Solc toolchain ───────────────────────────────────────────────────
    solc_binary_path: str = ""  # empty = py-solc-x default (~/.solcx)
    solc_show_progress: bool = False

    # ── CLI ──────────────────────────────────────────────────────────────
    default_address: str = "0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984"  # UNI


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
