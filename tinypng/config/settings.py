"""Client settings and logging configuration."""

import json
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tinypng.schemas.storage import AmazonS3Configuration

PACKAGE_LOGGER = "tinypng"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


class Settings(BaseSettings):
    """Settings loaded from ``TINYPNG_*`` environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="TINYPNG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_key: str = Field(
        default="",
        description="tinypng.com API key"
    )
    api_endpoint: str = Field(
        default="https://api.tinify.com/shrink",
        description="Compression endpoint"
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for API requests (seconds)"
    )

    # Amazon S3 defaults for store operations
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="AWS access key id used by store operations"
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="AWS secret access key used by store operations"
    )
    aws_bucket: Optional[str] = Field(
        default=None,
        description="Default S3 bucket"
    )
    aws_region: Optional[str] = Field(
        default=None,
        description="Default S3 region"
    )

    # Logging Configuration
    debug: bool = Field(
        default=False,
        description="Enable debug logging for the client"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Path to log file (if None, logs to stdout only)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def amazon_s3_configuration(self) -> Optional[AmazonS3Configuration]:
        """Default S3 settings, or None unless all four AWS values are set."""
        values = (
            self.aws_access_key_id,
            self.aws_secret_access_key,
            self.aws_bucket,
            self.aws_region,
        )
        if not all(values):
            return None
        return AmazonS3Configuration(*values)

    @property
    def log_level_numeric(self) -> int:
        """Get numeric log level."""
        return getattr(logging, self.log_level)

    def configure_logging(self) -> None:
        """Attach handlers to the ``tinypng`` logger based on settings.

        Opt-in helper for applications that want the client's log output.
        Only the ``tinypng`` logger is touched; handlers from an earlier call
        are replaced, and records still propagate to the root logger.
        """
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()

        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.log_file))

        if self.log_json:
            formatter: logging.Formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(self.log_format)

        for handler in handlers:
            handler.setFormatter(formatter)
            package_logger.addHandler(handler)

        package_logger.setLevel(logging.DEBUG if self.debug else self.log_level_numeric)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
