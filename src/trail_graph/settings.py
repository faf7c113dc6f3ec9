from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrailGraphSettings(BaseSettings):
    """Configuration for Trail Graph tooling.

    Environment variables are prefixed with TRAIL_GRAPH_.
    """

    model_config = SettingsConfigDict(env_prefix="TRAIL_GRAPH_", extra="ignore")

    # --- Core ---
    log_level: str = Field(default="INFO", description="Python logging level")

    # --- Corpus ---
    snapshot_path: str | None = Field(default=None, description="Default JSON snapshot for the CLI")

    # --- Sibling ordering ---
    sequential_relations: list[str] = Field(
        default_factory=list, description="Relation uids or names treated as sequential"
    )
    chain_sort: Literal["disabled", "primary", "secondary"] = "primary"


settings = TrailGraphSettings()
