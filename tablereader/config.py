"""
Configuration Module
====================

Loads process-wide settings from environment variables and a ``.env`` file.
Table-search tunables live in :mod:`tablereader.table.config`.
"""

import logging

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings, populated automatically from the environment.

    Attributes:
        LOG_LEVEL: level name applied to the ``tablereader`` logger
        LOG_FORMAT: ``logging`` format string used by the CLI
        OUTPUT_ENCODING: encoding used when the CLI writes JSON / CSV files
    """
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    OUTPUT_ENCODING: str = "utf-8"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Reject level names the ``logging`` module does not know."""
        name = (v or "").strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(
                f"LOG_LEVEL '{v}' is not a valid logging level. "
                "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )
        return name

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global singleton so the environment is only read once
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the settings singleton, creating it on first use.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
