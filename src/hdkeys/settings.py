"""
Unified settings management for hdkeys.

This module provides a centralized configuration system using pydantic-settings
that supports:
1. TOML configuration file (~/.hdkeys/config.toml)
2. Environment variables
3. CLI arguments (via typer, passed as overrides)

Priority (highest to lowest):
1. CLI arguments
2. Environment variables
3. Config file
4. Default values

Usage:
    from hdkeys.settings import get_settings

    settings = get_settings()
    print(settings.network.chain)
    print(settings.wallet.word_count)

Environment Variable Naming:
    - HDKEYS_ prefix, double underscore for nested settings
    - Examples: HDKEYS_NETWORK__CHAIN, HDKEYS_LOGGING__LEVEL
    - Maps to TOML sections: HDKEYS_WALLET__COIN -> [wallet] coin
"""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from hdkeys.bip32.network import Chain
from hdkeys.paths import get_config_path, get_default_data_dir


class NetworkSettings(BaseModel):
    """Network configuration."""

    chain: Chain = Field(
        default=Chain.MAINNET,
        description="Extended key network (mainnet or testnet)",
    )


class WalletSettings(BaseModel):
    """Mnemonic and BIP44 account defaults."""

    word_count: int = Field(
        default=24,
        description="Number of words for newly generated mnemonics (12, 15, 18, 21, 24)",
    )
    language: str = Field(
        default="english",
        description="BIP39 wordlist language",
    )
    coin: str = Field(
        default="BTC",
        description="BIP44 coin symbol (BTC, TBTC, ETH) or SLIP-44 id",
    )
    account: int = Field(
        default=0,
        ge=0,
        le=0x7FFFFFFF,
        description="BIP44 account index",
    )
    address_count: int = Field(
        default=10,
        ge=1,
        le=10000,
        description="Number of addresses to list",
    )

    @field_validator("word_count")
    @classmethod
    def validate_word_count(cls, v: int) -> int:
        if v not in (12, 15, 18, 21, 24):
            raise ValueError("word_count must be 12, 15, 18, 21, or 24")
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Log level: TRACE, DEBUG, INFO, WARNING, ERROR",
    )
    sensitive: bool = Field(
        default=False,
        description="Enable sensitive logging (mnemonics, private keys)",
    )


class HDKeysSettings(BaseSettings):
    """
    Main hdkeys settings class.

    Loads configuration from multiple sources with the following priority:
    1. Keyword arguments (CLI overrides)
    2. Environment variables
    3. TOML config file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="HDKEYS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Data directory (defaults to ~/.hdkeys)",
    )

    network: NetworkSettings = Field(default_factory=NetworkSettings)
    wallet: WalletSettings = Field(default_factory=WalletSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_source = TomlConfigSettingsSource(settings_cls)
        return (
            init_settings,
            env_settings,
            toml_source,
        )

    def get_data_dir(self) -> Path:
        """Get the data directory, using default if not set."""
        if self.data_dir is not None:
            return self.data_dir
        return get_default_data_dir()


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """
    Settings source that reads from a TOML config file.

    The file is $HDKEYS_CONFIG_FILE, or config.toml in the data directory.
    """

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._config: dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        config_path = get_config_path()

        if not config_path.exists():
            logger.debug(f"Config file not found at {config_path}, using defaults")
            return

        try:
            with open(config_path, "rb") as f:
                self._config = tomllib.load(f)
            logger.debug(f"Loaded config from {config_path}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Invalid TOML syntax in config file {config_path}")
            logger.error(f"Error: {e}")
            logger.error("Please fix the syntax errors in your config file and try again.")
            sys.exit(1)
        except OSError as e:
            logger.error(f"Failed to read config from {config_path}: {e}")
            sys.exit(1)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        value = self._config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._config


def generate_config_template() -> str:
    """
    Generate a config file template with all settings commented out.
    """
    lines: list[str] = [
        "# hdkeys configuration",
        "#",
        "# All settings are commented out - uncomment to override the default.",
        "#",
        "# Priority (highest to lowest):",
        "#   1. CLI arguments",
        "#   2. Environment variables (HDKEYS_SECTION__FIELD)",
        "#   3. This config file",
        "#   4. Built-in defaults",
        "",
    ]

    def add_section(title: str, model_cls: type[BaseModel], prefix: str) -> None:
        lines.append(f"# {'=' * 60}")
        lines.append(f"# {title}")
        lines.append(f"# {'=' * 60}")
        lines.append(f"[{prefix}]")
        lines.append("")

        for field_name, field_info in model_cls.model_fields.items():
            if field_info.description:
                lines.append(f"# {field_info.description}")

            default = field_info.default
            if isinstance(default, bool):
                value_str = str(default).lower()
            elif hasattr(default, "value"):  # Enum
                value_str = f'"{default.value}"'
            elif isinstance(default, str):
                value_str = f'"{default}"'
            else:
                value_str = str(default)

            lines.append(f"# {field_name} = {value_str}")
            lines.append("")

    add_section("Network Settings", NetworkSettings, "network")
    add_section("Wallet Settings", WalletSettings, "wallet")
    add_section("Logging Settings", LoggingSettings, "logging")

    return "\n".join(lines)


def ensure_config_file(data_dir: Path | None = None) -> Path:
    """
    Ensure the config file exists, creating a template if it doesn't.

    With no data_dir the file goes where settings are loaded from
    ($HDKEYS_CONFIG_FILE, else config.toml in the default data directory).

    Returns:
        Path to the config file.
    """
    config_path = data_dir / "config.toml" if data_dir is not None else get_config_path()

    if not config_path.exists():
        logger.info(f"Creating config file template at {config_path}")
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(generate_config_template())

    return config_path


# Global settings instance (lazy-loaded)
_settings: HDKeysSettings | None = None


def get_settings(**overrides: Any) -> HDKeysSettings:
    """
    Get the settings instance.

    On first call, loads settings from all sources. Subsequent calls
    return the cached instance unless reset_settings() is called or
    overrides are given.
    """
    global _settings
    if _settings is None or overrides:
        _settings = HDKeysSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None


__all__ = [
    "HDKeysSettings",
    "NetworkSettings",
    "WalletSettings",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
    "get_config_path",
    "generate_config_template",
    "ensure_config_file",
]
