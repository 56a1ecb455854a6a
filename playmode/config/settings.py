from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    transition_seconds: int = Field(default=10, gt=0, validation_alias="PLAYMODE_TRANSITION_SECONDS")
    default_step_seconds: int = Field(default=60, gt=0, validation_alias="PLAYMODE_DEFAULT_STEP_SECONDS")
    tick_interval_seconds: float = Field(default=1.0, gt=0, validation_alias="PLAYMODE_TICK_INTERVAL_SECONDS")
    time_adjust_options: list[int] = Field(
        default_factory=lambda: [15, 30, 60],
        validation_alias="PLAYMODE_TIME_ADJUST_OPTIONS",
    )
    log_level: str = Field(default="INFO", validation_alias="PLAYMODE_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="PLAYMODE_LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"PLAYMODE_LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got {value!r}")
        return level

    @field_validator("time_adjust_options")
    @classmethod
    def validate_time_adjust_options(cls, value: list[int]) -> list[int]:
        if not value or any(seconds <= 0 for seconds in value):
            raise ValueError("PLAYMODE_TIME_ADJUST_OPTIONS must be a non-empty list of positive seconds")
        return value


settings = Settings()
