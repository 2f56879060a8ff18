"""Data models for configuration management."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.decoration import DEFAULT_FOOTER, DEFAULT_HEADER, DecorationConfig, MarginSpec
from ..session.state import DEFAULT_ASSIST_ENDPOINT, DEFAULT_ASSIST_MODEL


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


@dataclass
class StudioConfiguration:
    """
    Complete studio configuration.

    Provides the assist endpoint settings, the initial export settings of
    new sessions and the audit database settings.
    """
    assist_endpoint: str = DEFAULT_ASSIST_ENDPOINT
    assist_model: str = DEFAULT_ASSIST_MODEL
    assist_timeout: float = 120.0
    header: DecorationConfig = DEFAULT_HEADER
    footer: DecorationConfig = DEFAULT_FOOTER
    margins: MarginSpec = field(default_factory=MarginSpec)
    page_format: str = "A4"
    database_url: Optional[str] = None
    enable_audit: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
