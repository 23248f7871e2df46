"""Configuration settings for polycore."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GeometryConfig(BaseModel):
    """Configuration for geometric comparisons.

    The tolerance is a distance in world units. Two corners closer than this
    coincide, a corner closer than this to a plane lies in it, and so on.
    """

    tolerance: float = Field(
        default=1e-4,
        ge=0.0,
        description="Distance below which two locations are considered coincident",
    )

    @property
    def squared_tolerance(self) -> float:
        """Square of the comparison tolerance."""
        return self.tolerance * self.tolerance


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file (None = console only)",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )

    @field_validator("log_level", "file_log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level


class PolycoreSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> PolycoreSettings:
    """Get default application settings."""
    return PolycoreSettings()
