import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings(BaseModel):
    """Runtime settings read from the environment (or a .env file)."""
    log_level: str = "INFO"
    analytics_lookback: int = Field(default=30, ge=1)
    behavior_lookback: int = Field(default=7, ge=1)
    coach_lookback: int = Field(default=14, ge=1)
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")


def get_settings() -> Settings:
    return Settings(
        log_level=os.environ.get("HABITCOACH_LOG_LEVEL", "INFO").upper(),
        analytics_lookback=_env_int("HABITCOACH_ANALYTICS_LOOKBACK", 30),
        behavior_lookback=_env_int("HABITCOACH_BEHAVIOR_LOOKBACK", 7),
        coach_lookback=_env_int("HABITCOACH_COACH_LOOKBACK", 14),
        host=os.environ.get("HABITCOACH_HOST", "0.0.0.0"),
        port=_env_int("HABITCOACH_PORT", 8000),
    )
