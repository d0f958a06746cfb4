"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    BASE_ASSETS,
    DEFAULT_BASE_RPC_URL,
    DEFAULT_MAINNET_RPC_URL,
    DEFAULT_SEPOLIA_RPC_URL,
    ETH_MAINNET_ASSETS,
    SEPOLIA_ASSETS,
    NetworkAssets,
)

load_dotenv()


class Network(str, Enum):
    MAINNET = "mainnet"
    SEPOLIA = "sepolia"
    BASE = "base"


NETWORK_ASSETS: dict[Network, NetworkAssets] = {
    Network.MAINNET: ETH_MAINNET_ASSETS,
    Network.SEPOLIA: SEPOLIA_ASSETS,
    Network.BASE: BASE_ASSETS,
}

NETWORK_RPC_DEFAULTS: dict[Network, str] = {
    Network.MAINNET: DEFAULT_MAINNET_RPC_URL,
    Network.SEPOLIA: DEFAULT_SEPOLIA_RPC_URL,
    Network.BASE: DEFAULT_BASE_RPC_URL,
}


class VaultSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with USD_VAULT_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- network / endpoints ---
    network: Network = Network.MAINNET
    rpc_url: str | None = None
    price_feed_address: str | None = None
    reference_asset: str | None = None

    # --- bank limits (unit-of-account base units) ---
    bank_cap_value: int | None = Field(default=None, gt=0)
    withdrawal_limit_value: int | None = Field(default=None, gt=0)

    # --- assets ---
    asset_precisions: dict[str, int] = Field(default_factory=dict)
    pegged_assets: list[str] | None = None

    # --- RPC settings ---
    rpc_max_tries: int = Field(default=3, ge=1)

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="USD_VAULT_",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_limit_ordering(self) -> "VaultSettings":
        """Validate that the withdrawal limit does not exceed the bank cap."""
        if (
            self.bank_cap_value is not None
            and self.withdrawal_limit_value is not None
            and self.withdrawal_limit_value > self.bank_cap_value
        ):
            raise ValueError(
                f"withdrawal_limit_value ({self.withdrawal_limit_value}) "
                f"must not exceed bank_cap_value ({self.bank_cap_value})"
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("USD_VAULT_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("usd-vault.toml")
                    user_config = Path.home() / ".config" / "usd-vault" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [usd_vault]
                body = data.get("usd_vault", data)
                if not isinstance(body, dict):
                    return {}
                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    @property
    def assets(self) -> NetworkAssets:
        """Get the well-known assets for the configured network."""
        if self.network not in NETWORK_ASSETS:
            raise ValueError(f"Unknown network: {self.network}")
        return NETWORK_ASSETS[self.network]

    @property
    def rpc_url_required(self) -> str:
        """RPC endpoint, falling back to the network default."""
        return self.rpc_url or NETWORK_RPC_DEFAULTS[self.network]

    @property
    def price_feed_address_required(self) -> str:
        """Get the ETH/USD feed address, raising ValueError if none is known."""
        feed = self.price_feed_address or self.assets["ETH_USD_FEED"]
        if feed is None:
            raise ValueError("price_feed_address must be configured")
        return feed

    @property
    def reference_asset_required(self) -> str:
        """Get the 1:1 reference asset, raising ValueError if none is known."""
        asset = self.reference_asset or self.assets["USDC"]
        if asset is None:
            raise ValueError("reference_asset must be configured")
        return asset

    @property
    def bank_cap_value_required(self) -> int:
        """Get bank_cap_value, raising ValueError if not set."""
        if self.bank_cap_value is None:
            raise ValueError("bank_cap_value must be configured")
        return self.bank_cap_value

    @property
    def withdrawal_limit_value_required(self) -> int:
        """Get withdrawal_limit_value, raising ValueError if not set."""
        if self.withdrawal_limit_value is None:
            raise ValueError("withdrawal_limit_value must be configured")
        return self.withdrawal_limit_value
