"""
Configuration management for Heads Up.

Settings are pydantic-settings models with validation and environment
variable overrides. Each section reads its own ``HEADSUP_<SECTION>_`` prefix
and an optional ``.env`` file.
"""

from enum import Enum
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class BaseConfig(BaseSettings):
    """
    Base configuration class with common settings for all components.

    All other configuration classes inherit from this class.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HEADSUP_",
        extra="ignore",
    )

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

class DetectorConfig(BaseConfig):
    """
    Thresholds and timing for the pose detector.

    Frozen: a detector is built with one config and never sees it change.
    Angles are in degrees, times in seconds.
    """
    model_config = SettingsConfigDict(env_prefix="HEADSUP_DETECTOR_", frozen=True)

    gamma_threshold: float = 70.0  # minimum |gamma| for landscape framing
    beta_threshold: float = 20.0   # maximum |beta| for near-horizontal
    stability_time: float = 0.5    # dwell before a pose change is confirmed

    @field_validator("gamma_threshold")
    @classmethod
    def validate_gamma_threshold(cls, v):
        """Gamma only spans [-90, 90], so the threshold must too."""
        if not 0.0 <= v <= 90.0:
            raise ValueError("gamma_threshold must be between 0 and 90 degrees")
        return v

    @field_validator("beta_threshold")
    @classmethod
    def validate_beta_threshold(cls, v):
        """Validate beta threshold is within the sensor range."""
        if not 0.0 <= v <= 180.0:
            raise ValueError("beta_threshold must be between 0 and 180 degrees")
        return v

    @field_validator("stability_time")
    @classmethod
    def validate_stability_time(cls, v):
        if v < 0.0:
            raise ValueError("stability_time cannot be negative")
        return v

class EventConfig(BaseConfig):
    """Configuration for the event system."""
    model_config = SettingsConfigDict(env_prefix="HEADSUP_EVENT_")

    max_trace_events: int = 1000
    tracing_enabled: bool = True

class ServiceConfig(BaseConfig):
    """Configuration for service management."""
    model_config = SettingsConfigDict(env_prefix="HEADSUP_SERVICE_")

    service_startup_timeout: float = 10.0  # seconds
    service_shutdown_timeout: float = 5.0  # seconds

class SensorConfig(BaseConfig):
    """Configuration for orientation sample sources."""
    model_config = SettingsConfigDict(env_prefix="HEADSUP_SENSOR_")

    replay_interval: float = 0.05  # seconds between replayed samples
    debug_every: int = 10          # log a readout every N samples

    @field_validator("replay_interval")
    @classmethod
    def validate_replay_interval(cls, v):
        """Validate the replay interval is positive."""
        if v <= 0.0:
            raise ValueError("replay_interval must be positive")
        return v

    @field_validator("debug_every")
    @classmethod
    def validate_debug_every(cls, v):
        if v < 1:
            raise ValueError("debug_every must be at least 1")
        return v

class ApplicationConfig(BaseConfig):
    """
    Main application configuration that combines all component configurations.

    This is the top-level configuration class used by the application.
    """
    model_config = SettingsConfigDict(env_nested_delimiter="__")

    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    event: EventConfig = Field(default_factory=EventConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    sensor: SensorConfig = Field(default_factory=SensorConfig)

def get_config() -> ApplicationConfig:
    """
    Get the application configuration.

    Returns:
        The validated ApplicationConfig instance
    """
    return ApplicationConfig()
