from pydantic import Field, NonNegativeFloat, NonNegativeInt, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlexHttpSettings(BaseSettings):
    TIMEOUT: PositiveFloat = Field(
        description="Per-attempt timeout in seconds",
        default=30.0,
    )

    MAX_RETRIES: NonNegativeInt = Field(
        description="Retries after the first failed attempt",
        default=0,
    )

    RETRY_BASE_DELAY: NonNegativeFloat = Field(
        description="Linear backoff step in seconds, multiplied by the attempt number",
        default=0.5,
    )

    ENABLE_LOGGING: bool = Field(
        description="Log pipeline events at INFO instead of DEBUG",
        default=False,
    )

    MAX_CONNECTIONS_PER_HOST: PositiveInt = Field(
        description="Connection pool size",
        default=6,
    )

    KEEPALIVE_EXPIRY: PositiveFloat = Field(
        description="Idle keep-alive connection lifetime in seconds",
        default=10.0,
    )

    LOG_LEVEL: str = Field(
        description="Logging level used by init_logging",
        default="INFO",
    )

    LOG_FILE: str | None = Field(
        description="File path for log output.",
        default=None,
    )

    LOG_FILE_MAX_SIZE: PositiveInt = Field(
        description="Maximum file size for file rotation retention, the unit is megabytes (MB)",
        default=20,
    )

    LOG_FILE_BACKUP_COUNT: PositiveInt = Field(
        description="Maximum file backup count file rotation retention",
        default=5,
    )

    LOG_FORMAT: str = Field(
        description="Format string for log messages",
        default=(
            "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] "
            "[%(filename)s:%(lineno)d] %(trace_id)s - %(message)s"
        ),
    )

    LOG_DATEFORMAT: str | None = Field(
        description="Date format string for log timestamps",
        default=None,
    )

    model_config = SettingsConfigDict(
        env_prefix="FLEX_HTTP_",
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


def load_settings() -> FlexHttpSettings:
    return FlexHttpSettings()
