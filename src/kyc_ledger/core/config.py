"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class TokenConfig(BaseModel):
    name: str = "Compliant Token"
    symbol: str = "KYC"
    decimals: int = Field(default=18, ge=0, le=36)
    initial_supply: int = Field(default=0, ge=0)
    initial_holder: str = ""  # Receives the whole initial supply


class GovernanceConfig(BaseModel):
    admins: list[str] = Field(default_factory=list)
    quorum: int = 1


class JournalConfig(BaseModel):
    persist_path: str | None = None  # JSONL audit trail, appended per commit
    max_memory_entries: int = Field(default=100_000, gt=0)


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    token: TokenConfig = Field(default_factory=TokenConfig)
    governance: GovernanceConfig = Field(default_factory=GovernanceConfig)
    journal: JournalConfig = Field(default_factory=JournalConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "KYC_LEDGER_", "env_nested_delimiter": "__"}

    def validate_construction(self) -> None:
        """Enforce construction-time invariants the models cannot express."""
        admins = self.governance.admins
        if not admins:
            raise ConfigError("governance.admins must list at least one admin")
        if len(set(admins)) != len(admins):
            raise ConfigError(f"governance.admins contains duplicates: {admins}")
        if not 1 <= self.governance.quorum <= len(admins):
            raise ConfigError(
                f"governance.quorum must be between 1 and {len(admins)}, "
                f"got {self.governance.quorum}"
            )
        if self.token.initial_supply > 0 and not self.token.initial_holder:
            raise ConfigError(
                "token.initial_holder is required when initial_supply > 0"
            )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: *config_path* was given but cannot be read or parsed.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        import tomli

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    return Settings(**data)
