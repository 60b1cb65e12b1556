# config/settings.py
import os
import sys
from datetime import timedelta
from dotenv import load_dotenv
from pydantic import ValidationError, Field, field_validator
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")

    # Limits
    RATE_LIMIT_TIMES: int = Field(default=5, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # ClickHouse (HTTP interface)
    CLICKHOUSE_URL: str = Field(..., validation_alias="CLICKHOUSE_URL")
    CLICKHOUSE_USER: str = Field(default="default", validation_alias="CLICKHOUSE_USER")
    CLICKHOUSE_PASSWORD: str = Field(default="", validation_alias="CLICKHOUSE_PASSWORD")
    CLICKHOUSE_TABLE: str = Field(default="graphite", validation_alias="CLICKHOUSE_TABLE")
    CLICKHOUSE_TIMEOUT_SECONDS: float = Field(
        default=60.0, validation_alias="CLICKHOUSE_TIMEOUT_SECONDS"
    )

    # Autohide knobs
    AUTOHIDE_ENABLED: bool = Field(default=True, validation_alias="AUTOHIDE_ENABLED")
    AUTOHIDE_RUN_DELAY: timedelta = Field(
        default=timedelta(minutes=10), validation_alias="AUTOHIDE_RUN_DELAY"
    )
    AUTOHIDE_PERIOD: timedelta = Field(
        default=timedelta(days=1), validation_alias="AUTOHIDE_PERIOD"
    )
    AUTOHIDE_MAX_VALUES_COUNT: int = Field(
        default=200, ge=1, validation_alias="AUTOHIDE_MAX_VALUES_COUNT"
    )
    AUTOHIDE_MISSING_DAYS: int = Field(
        default=7, ge=0, validation_alias="AUTOHIDE_MISSING_DAYS"
    )
    AUTOHIDE_BATCH_SIZE: int = Field(
        default=10_000, ge=1, validation_alias="AUTOHIDE_BATCH_SIZE"
    )
    AUTOHIDE_RETRY_COUNT: int = Field(
        default=10, ge=1, validation_alias="AUTOHIDE_RETRY_COUNT"
    )
    # Fixed delay between attempts, ISO 8601 duration e.g. "PT5S"
    AUTOHIDE_RETRY_WAIT: timedelta = Field(
        default=timedelta(seconds=5), validation_alias="AUTOHIDE_RETRY_WAIT"
    )

    @field_validator("AUTOHIDE_PERIOD")
    @classmethod
    def _positive_period(cls, v: timedelta) -> timedelta:
        if v.total_seconds() <= 0:
            raise ValueError("must be a positive duration")
        return v

    @field_validator("AUTOHIDE_RUN_DELAY", "AUTOHIDE_RETRY_WAIT")
    @classmethod
    def _non_negative_duration(cls, v: timedelta) -> timedelta:
        if v.total_seconds() < 0:
            raise ValueError("must not be negative")
        return v

    # Logging knobs
    LOGGER_NAME: str = "graphite-autohide"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
