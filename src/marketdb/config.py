"""
marketdb configuration.

Settings come from the environment (prefix ``MARKETDB_``) and are validated
with pydantic-settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the store and the shell."""

    model_config = SettingsConfigDict(env_prefix="MARKETDB_")

    seed_path: Path | None = Field(default=None, description="Seed snapshot JSON; defaults to the bundled seed")
    seed_enabled: bool = Field(default=True, description="Load the seed snapshot on initialization")
    log_level: str = Field(default="WARNING", description="Logging level for the shell")
    timestamp_orderings: list[str] = Field(
        default_factory=lambda: [
            "createdAt DESC",
            "orderDate DESC",
            "lastMessageTime DESC",
            "timestamp ASC",
        ],
        description="ORDER BY clauses that sort by timestamp",
    )

    @field_validator("timestamp_orderings")
    @classmethod
    def _check_orderings(cls, value: list[str]) -> list[str]:
        for entry in value:
            parts = entry.split()
            if len(parts) != 2 or parts[1].lower() not in ("asc", "desc"):
                raise ValueError(f"Expected '<field> ASC|DESC', got {entry!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def orderings(self) -> frozenset[tuple[str, str]]:
        """Recognized orderings as ``(field, direction)`` pairs."""
        pairs = (entry.split() for entry in self.timestamp_orderings)
        return frozenset((field, direction.lower()) for field, direction in pairs)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
