"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PICKPATH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Pick Path Optimizer API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level for the service.")
    data_root: Path = Field(default=Path("data"), description="Root directory for warehouse layout files.")
    locations_file: Optional[Path] = Field(
        default=None,
        description="Shelf locations with coordinates and layout fields. Defaults to data_root/locations.csv.",
    )
    items_file: Optional[Path] = Field(
        default=None,
        description="Item catalog (SKU and display name). Defaults to data_root/items.csv.",
    )
    inventory_file: Optional[Path] = Field(
        default=None,
        description="Inventory records mapping SKUs to their locations. Defaults to data_root/inventory.csv.",
    )
    default_strategy: str = Field(default="enhanced_two_opt")
    unresolved_sku_policy: Literal["drop", "fail"] = Field(
        default="drop",
        description="Whether SKUs without inventory are silently dropped or rejected.",
    )
    two_opt_max_passes: int = Field(default=1000, ge=1)
    two_opt_restarts: int = Field(default=0, ge=0)
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for the 2-opt random restarts. Leave unset for a fresh seed per request.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "locations_file", "items_file", "inventory_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None:
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @model_validator(mode="after")
    def _default_data_files(self) -> "Settings":
        """Place unset layout files under ``data_root``."""
        self.data_root = self.data_root.expanduser().resolve()
        self.locations_file = self.locations_file or self.data_root / "locations.csv"
        self.items_file = self.items_file or self.data_root / "items.csv"
        self.inventory_file = self.inventory_file or self.data_root / "inventory.csv"
        return self

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
