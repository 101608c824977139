"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    troutgen_env: str = "development"
    troutgen_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Ledger and storage
    network_id: int = 0x5AFF
    ledger_url: str = ""
    ipfs_api_url: str = ""
    http_timeout_seconds: float = 30.0

    # Keys; an empty secret selects the development key
    root_secret_hex: str = ""
    encryption_key_id: int = 1

    # Orchestration
    batch_size: int = 30
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0
    linear_scan_threshold: int = 64
    submit_gas_limit: int | None = None
    cache_checkpoint_path: str | None = None

    # Item attributes
    genesis_cutoff: int = 137
    seasonal_network: int = 0x5AFE
    seasonal_first: int = 236
    seasonal_last: int = 241

    network_names: dict[int, str] = {
        0x5AFF: "Sapphire Testnet",
        0x5AFE: "Sapphire",
        3141: "Hyperspace",
        314: "Filecoin",
        1337: "Ganache",
        31337: "Hardhat",
    }

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
