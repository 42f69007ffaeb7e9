"""
Runtime configuration loaded from the environment (and an optional .env file)
"""
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, model_validator

from jdmatch.utils.exceptions import ConfigurationError

load_dotenv()


class Settings(BaseModel):
    """Matching engine settings"""
    environment: str = Field(default="development", description="Deployment environment")
    log_level: str = Field(default="INFO", description="Root log level")
    report_dir: str = Field(default="./reports", description="Directory for ranking reports")
    select_min: float = Field(default=0.72, ge=0.0, le=1.0, description="Core score at or above which a candidate is accepted")
    reject_max: float = Field(default=0.48, ge=0.0, le=1.0, description="Core score at or below which a candidate is rejected")
    rank_workers: int = Field(default=4, ge=1, le=64, description="Thread pool size for batch ranking")
    slow_request_threshold: float = Field(default=2.0, gt=0.0, description="Seconds before a request is logged as slow")

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.reject_max >= self.select_min:
            raise ValueError("reject_max must be less than select_min")
        return self


def load_settings() -> Settings:
    """Build settings from environment variables, raising ConfigurationError on bad values"""
    raw = {
        "environment": os.getenv("ENVIRONMENT", "development").lower(),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "report_dir": os.getenv("REPORT_DIR", "./reports"),
        "select_min": os.getenv("SELECT_MIN", "0.72"),
        "reject_max": os.getenv("REJECT_MAX", "0.48"),
        "rank_workers": os.getenv("RANK_WORKERS", "4"),
        "slow_request_threshold": os.getenv("SLOW_REQUEST_THRESHOLD", "2.0"),
    }
    try:
        return Settings(**raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid configuration: {first.get('msg')}",
            config_key=key,
            config_value=raw.get(key) if key else None,
            cause=e
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
