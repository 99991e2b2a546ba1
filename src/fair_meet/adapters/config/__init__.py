"""Configuration adapters."""

from fair_meet.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
