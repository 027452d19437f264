import logging
import os
from dataclasses import dataclass, field

from oauth2_utils.registry import (
    DEFAULT_STANDARD_SETS,
    RegistryError,
    StandardSet,
    parse_standard_sets,
)

LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """Settings from environment variables."""

    # Standard sets used when a registry query does not name any
    standard_sets: tuple[StandardSet, ...] = field(
        default_factory=lambda: DEFAULT_STANDARD_SETS
    )

    # Logging settings
    log_format: str = "text"  # "json" or "text"
    log_level: str = "WARNING"

    def __post_init__(self):
        """Validate logging and standard set configuration."""
        logger = logging.getLogger(__name__)

        self.log_format = self.log_format.lower()
        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid LOG_FORMAT: {self.log_format}. "
                f"Must be one of {', '.join(LOG_FORMATS)}"
            )

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.log_level}. "
                f"Must be one of {', '.join(LOG_LEVELS)}"
            )

        if not self.standard_sets:
            logger.warning(
                "OAUTH2_UTILS_STANDARD_SETS is empty, registry queries will "
                f"default to {DEFAULT_STANDARD_SETS[0].value}"
            )
            self.standard_sets = DEFAULT_STANDARD_SETS


def _standard_sets_from_env() -> tuple[StandardSet, ...]:
    value = os.getenv("OAUTH2_UTILS_STANDARD_SETS", "oauth2")
    names = [name for name in value.split(",") if name.strip()]
    try:
        return parse_standard_sets(names)
    except RegistryError as e:
        raise ValueError(f"Invalid OAUTH2_UTILS_STANDARD_SETS: {e}") from e


def get_settings() -> Settings:
    """Get settings from environment variables.

    Returns:
        Settings object with configuration values
    """
    return Settings(
        standard_sets=_standard_sets_from_env(),
        log_format=os.getenv("LOG_FORMAT", "text"),
        log_level=os.getenv("LOG_LEVEL", "WARNING"),
    )
