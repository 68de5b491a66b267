"""Core infrastructure: configuration, logging and the error hierarchy."""

from mockstore.core.config import RollbackPolicy, Settings, get_settings
from mockstore.core.logging_config import setup_logging

__all__ = ["RollbackPolicy", "Settings", "get_settings", "setup_logging"]
