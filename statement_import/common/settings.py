"""
Runtime settings read from the environment.
"""
import os
import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_LAYOUTS_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'parsing', 'layouts'
)


class EngineSettings(BaseSettings):
    """
    STATEMENT_IMPORT_* environment variables; unset or empty ones keep the defaults.
    """
    model_config = SettingsConfigDict(env_prefix='STATEMENT_IMPORT_', env_ignore_empty=True, frozen=True)

    layouts_dir: str = Field(default=BUNDLED_LAYOUTS_DIR)
    max_workers: int = Field(default=4)
    log_level: int = Field(default=logging.INFO)
    log_file: Optional[str] = Field(default=None)

    @field_validator('log_level', mode='before')
    @classmethod
    def _level_from_name(cls, value):
        if isinstance(value, int):
            return value
        level = logging.getLevelName(str(value).strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator('max_workers')
    @classmethod
    def _at_least_one_worker(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls()
