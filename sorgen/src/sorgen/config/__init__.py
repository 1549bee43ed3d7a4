"""Configuration module for sorgen."""

from .settings import Settings, get_settings, reset_settings
from .logging import setup_logging, get_logger

__all__ = ["Settings", "get_settings", "reset_settings", "setup_logging", "get_logger"]
