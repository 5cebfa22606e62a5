"""Application settings and configuration.

This module defines all configuration options for the Stakemod engine.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    Constructing an instance directly with field names is supported so tests
    and embedding hosts can supply their own values.
    """

    # Identity allowed to run owner-only operations (grading hook).
    owner_identity: str = Field(default="stakemod-owner", alias="STAKEMOD_OWNER")

    # Database configuration
    database_url: str = Field(default="sqlite:///./stakemod.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Staking rules
    min_moderator_stake: int = Field(default=1000, ge=0, alias="MIN_MODERATOR_STAKE")
    min_appeal_stake: int = Field(default=2000, ge=0, alias="MIN_APPEAL_STAKE")

    # Appeal window, in block-height units after a decision is finalized.
    appeal_window: int = Field(default=144, ge=0, alias="APPEAL_WINDOW")

    # Weight applied when a moderator declared nothing for the vote's region.
    # Declared weights are bounded by the regional_expertise check constraint.
    default_regional_weight: int = Field(default=50, ge=1, le=100, alias="DEFAULT_REGIONAL_WEIGHT")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def staking_rules(self) -> dict[str, int]:
        """Return the staking thresholds as a convenience dictionary."""
        return {
            "min_moderator_stake": self.min_moderator_stake,
            "min_appeal_stake": self.min_appeal_stake,
            "appeal_window": self.appeal_window,
        }


settings = Settings()
