"""Centralized application configuration."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from mb_vault.crypto import SCRYPT_N

DEFAULT_DATA_DIR = Path.home() / ".local" / "mb-vault"
MIN_SCRYPT_N = 16_384


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for all application data")
    vault_file: Path | None = Field(default=None, description="Vault file override (default: data_dir / vault.json)")
    scrypt_n: int = Field(default=SCRYPT_N, ge=MIN_SCRYPT_N, description="scrypt cost for newly created vaults")

    @field_validator("scrypt_n")
    @classmethod
    def _power_of_two(cls, value: int) -> int:
        if value & (value - 1):
            msg = "scrypt_n must be a power of two"
            raise ValueError(msg)
        return value

    @computed_field(description="Encrypted vault file")
    @property
    def vault_path(self) -> Path:
        """Encrypted vault file."""
        return self.vault_file if self.vault_file is not None else self.data_dir / "vault.json"

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "vault.log"

    @staticmethod
    def build(data_dir: Path | None = None) -> "Config":
        """Build a Config from defaults and optional config.toml."""
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            if isinstance(toml_data.get("vault_file"), str):
                kwargs["vault_file"] = Path(toml_data["vault_file"]).expanduser()
            if isinstance(toml_data.get("scrypt_n"), int):
                kwargs["scrypt_n"] = toml_data["scrypt_n"]

        return Config(**kwargs)
