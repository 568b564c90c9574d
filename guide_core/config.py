import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from guide_core.utils.timezone import resolve_timezone


logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class GuideSettings(BaseSettings):
    """Guide settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    visible_hours: int = 2
    slot_minutes: int = 30
    navigation_limit_days: int = 7  # How far the window may move from now
    display_timezone: str = "UTC"  # Wall clock used for slot alignment
    unknown_channel_name: str = "Unknown Channel"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GUIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("visible_hours")
    @classmethod
    def validate_visible_hours(cls, value: int) -> int:
        """Validate the grid shows between 1 and 24 hours."""
        if value <= 0:
            raise ValueError("visible_hours must be > 0")
        if value > 24:
            raise ValueError("visible_hours must be <= 24")
        return value

    @field_validator("slot_minutes")
    @classmethod
    def validate_slot_minutes(cls, value: int) -> int:
        """Validate slot length evenly divides a day."""
        if value <= 0:
            raise ValueError("slot_minutes must be > 0")
        if (24 * 60) % value:
            raise ValueError("slot_minutes must evenly divide 1440 (minutes per day)")
        return value

    @field_validator("navigation_limit_days")
    @classmethod
    def validate_navigation_limit(cls, value: int) -> int:
        """Validate navigation limit is positive and reasonable."""
        if value <= 0:
            raise ValueError("navigation_limit_days must be > 0")
        if value > 365:
            raise ValueError("navigation_limit_days must be <= 365 days")
        return value

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, value: str) -> str:
        """Validate display timezone is a known IANA zone."""
        resolve_timezone(value)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return normalized

    @model_validator(mode="after")
    def validate_window_configuration(self):
        """Validate cross-field configuration."""
        if (self.visible_hours * 60) % self.slot_minutes:
            raise ValueError(
                "visible_hours must span a whole number of slots"
            )
        return self

    @property
    def visible_slots(self) -> int:
        return self.visible_hours * 60 // self.slot_minutes

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Visible Hours: %s (%s slots)", self.visible_hours, self.visible_slots)
        logger.info("  Slot Length: %s minutes", self.slot_minutes)
        logger.info("  Navigation Limit: %s days", self.navigation_limit_days)
        logger.info("  Display Timezone: %s", self.display_timezone)


settings = GuideSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
