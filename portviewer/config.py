"""
Configuration Module - Settings loaded from the environment and .env
"""
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator


MIN_REFRESH_INTERVAL = 1
MAX_REFRESH_INTERVAL = 3600


class Settings(BaseModel):
    """Runtime settings for PortViewer"""

    refresh_interval: int = Field(default=5, ge=MIN_REFRESH_INTERVAL, le=MAX_REFRESH_INTERVAL)
    auto_refresh: bool = False
    backend: Literal['psutil', 'lsof'] = 'psutil'
    log_dir: str = "app_log"
    log_level: str = "INFO"
    theme: Literal['light', 'dark', 'system'] = 'system'

    @field_validator('log_level')
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"invalid log level: {value}")
        return value


ENV_VARS = {
    'refresh_interval': 'PORTVIEW_REFRESH_INTERVAL',
    'auto_refresh': 'PORTVIEW_AUTO_REFRESH',
    'backend': 'PORTVIEW_BACKEND',
    'log_dir': 'PORTVIEW_LOG_DIR',
    'log_level': 'PORTVIEW_LOG_LEVEL',
    'theme': 'PORTVIEW_THEME',
}


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from PORTVIEW_* environment variables

    Args:
        dotenv: Whether to read a .env file first

    Raises:
        ValueError: If any variable holds an invalid value
    """
    if dotenv:
        load_dotenv()

    values = {}
    for field, env_var in ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is not None and raw.strip() != "":
            values[field] = raw.strip()

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid PortViewer configuration: {e}") from e
