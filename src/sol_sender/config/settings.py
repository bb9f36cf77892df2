"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``SOLSENDER_``, nested via ``__``)
2. YAML config file (``SOLSENDER_CONFIG_PATH`` env var or ``AppConfig.from_yaml``)
3. Defaults defined here
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sol_sender.chain.rpc.models import Commitment

# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class RPCConfig(BaseSettings):
    """Solana RPC endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSENDER_RPC__",
        case_sensitive=False,
    )

    url: str = "https://api.mainnet-beta.solana.com"
    ws_url: str = Field(
        default="",
        description="Websocket endpoint; derived from url when empty",
    )
    timeout: float = 30.0
    block_height_poll_interval: float = 1.0
    resubscribe_interval: float = 1.0  # seconds between websocket reconnects

    @model_validator(mode="after")
    def _derive_ws_url(self) -> Self:
        if not self.ws_url:
            if self.url.startswith("https://"):
                self.ws_url = "wss://" + self.url.removeprefix("https://")
            elif self.url.startswith("http://"):
                self.ws_url = "ws://" + self.url.removeprefix("http://")
            else:
                self.ws_url = self.url
        return self


class SenderConfig(BaseSettings):
    """Resend, confirmation and post-confirmation fetch settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSENDER_SENDER__",
        case_sensitive=False,
    )

    resend_interval: float = 2.0  # seconds
    poll_interval: float = 2.0  # seconds
    block_height_margin: int = Field(
        default=150,
        ge=0,
        description="Blocks subtracted from last_valid_block_height before waiting",
    )
    fetch_attempts: int = Field(default=5, ge=1)
    fetch_min_backoff: float = 1.0  # seconds
    fetch_backoff_factor: float = 1.0
    skip_preflight: bool = True
    commitment: Commitment = Commitment.CONFIRMED
    max_supported_transaction_version: int = 0
    resend_warn_limit: int = Field(
        default=10,
        ge=0,
        description="Resend failures logged at WARNING before dropping to DEBUG",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level configuration.

    Loads settings from environment variables (``SOLSENDER_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLSENDER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: str = "INFO"
    config_path: str = ""
    metrics_enabled: bool = True

    rpc: RPCConfig = Field(default_factory=RPCConfig)
    sender: SenderConfig = Field(default_factory=SenderConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
