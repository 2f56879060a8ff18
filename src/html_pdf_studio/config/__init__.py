"""Configuration management for the HTML PDF Studio."""

from .config_manager import ConfigurationManager
from .models import (
    StudioConfiguration,
    ConfigurationError,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "StudioConfiguration",
    "ConfigurationError",
    "ValidationResult",
]
