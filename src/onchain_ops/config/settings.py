"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``ONCHAIN_OPS_``, nested via ``__``)
2. YAML config file (``config_path`` or ``ONCHAIN_OPS_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class NodeConfig(BaseSettings):
    """Blockchain node (JSON-RPC) settings."""

    model_config = SettingsConfigDict(
        env_prefix="ONCHAIN_OPS_NODE__",
        case_sensitive=False,
    )

    url: str = "https://sepolia.base.org"
    timeout: float = 30.0
    auth_token: str = ""


class WaitConfig(BaseSettings):
    """Polling defaults for waiting on a terminal state."""

    model_config = SettingsConfigDict(
        env_prefix="ONCHAIN_OPS_WAIT__",
        case_sensitive=False,
    )

    interval_seconds: float = Field(default=0.2, gt=0)
    timeout_seconds: float = Field(default=10.0, ge=0)


class NetworkConfig(BaseModel):
    """A network and its native asset."""

    network_id: str
    native_asset_id: str = "eth"
    decimals: int = Field(default=18, ge=0)
    explorer_url: str = ""


def _default_networks() -> list[NetworkConfig]:
    return [
        NetworkConfig(
            network_id="base-sepolia",
            explorer_url="https://sepolia.basescan.org",
        ),
        NetworkConfig(
            network_id="base-mainnet",
            explorer_url="https://basescan.org",
        ),
        NetworkConfig(
            network_id="ethereum-mainnet",
            explorer_url="https://etherscan.io",
        ),
        NetworkConfig(
            network_id="ethereum-holesky",
            explorer_url="https://holesky.etherscan.io",
        ),
    ]


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

    Loads settings from environment variables (``ONCHAIN_OPS_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="ONCHAIN_OPS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: str = "INFO"
    config_path: str = ""

    node: NodeConfig = Field(default_factory=NodeConfig)
    wait: WaitConfig = Field(default_factory=WaitConfig)
    networks: list[NetworkConfig] = Field(default_factory=_default_networks)

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

    def network(self, network_id: str) -> NetworkConfig | None:
        """Return the configured network with this id, if any."""
        for net in self.networks:
            if net.network_id == network_id:
                return net
        return None
