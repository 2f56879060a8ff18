"""Configuration Manager implementation for the HTML PDF Studio.

This module loads, validates and applies the studio configuration: assist
endpoint settings, the export settings new sessions start with, and the
audit database settings.
"""

import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..decoration.margins import clamp_margins
from ..models.decoration import MARGIN_LIMITS, DecorationConfig, MarginSpec
from ..models.enums import Alignment, MarginUnit
from ..session.serialization import SessionSerializer
from ..session.state import AssistState, SessionState
from .models import ConfigurationError, StudioConfiguration, ValidationResult


logger = logging.getLogger(__name__)


ENV_PREFIX = "STUDIO_"
TRUTHY_VALUES = {"1", "true", "yes", "y"}
SUPPORTED_PAGE_FORMATS = {"A3", "A4", "A5", "LETTER", "LEGAL"}
DECORATION_BOOLEAN_FIELDS = ("is_rich_content", "show_page_number", "show_date")
MARGIN_SIDES = ("top", "right", "bottom", "left")


class ConfigurationManager:
    """
    Manager for studio configuration.

    Handles loading, validation, environment overrides and access to the
    configuration new editing sessions are created from.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional path of a JSON configuration file.
        """
        self._config_path = Path(config_path) if config_path else None
        self._configuration = StudioConfiguration()
        self._is_loaded = False

    @property
    def configuration(self) -> StudioConfiguration:
        """Get the current studio configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, source: Optional[Union[str, Path, Dict[str, Any]]] = None) -> ValidationResult:
        """
        Load and validate a configuration.

        Supports loading from a JSON file path or a dictionary. When no
        source is given the path passed to the constructor is used.

        Args:
            source: File path or dictionary.

        Returns:
            ValidationResult with any warnings collected while loading.

        Raises:
            ConfigurationError: If the file is missing or validation fails.
        """
        if source is None:
            if self._config_path is None:
                raise ConfigurationError("No configuration source specified")
            source = self._config_path

        raw_data = self._parse_source(source)
        result, configuration = self.validate(raw_data)

        if not result.is_valid:
            raise ConfigurationError(
                "Studio configuration validation failed",
                validation_result=result
            )

        for warning in result.warnings:
            logger.warning(f"Configuration: {warning}")

        self._configuration = configuration
        self._is_loaded = True
        return result

    def validate(self, data: Any) -> tuple[ValidationResult, Optional[StudioConfiguration]]:
        """
        Validate a configuration dictionary.

        Out-of-range margins are clamped and reported as warnings; every
        other problem is an error.

        Returns:
            Tuple of the validation result and the configuration, which is
            None when validation failed.
        """
        result = ValidationResult(is_valid=True)
        if not isinstance(data, dict):
            result.add_error("Configuration must be a JSON object")
            return result, None

        defaults = StudioConfiguration()
        assist_data = data.get("assist", {})
        audit_data = data.get("audit", {})

        for section, value in (("assist", assist_data), ("audit", audit_data)):
            if not isinstance(value, dict):
                result.add_error(f"'{section}' must be an object")
        if not result.is_valid:
            return result, None

        endpoint = assist_data.get("endpoint", defaults.assist_endpoint)
        if not isinstance(endpoint, str) or not endpoint.startswith(("http://", "https://")):
            result.add_error("assist.endpoint must be an http(s) URL")

        model = assist_data.get("model", defaults.assist_model)
        if not isinstance(model, str) or not model.strip():
            result.add_error("assist.model must be a non-empty string")

        timeout = assist_data.get("timeout", defaults.assist_timeout)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            result.add_error("assist.timeout must be a positive number")

        header = self._validate_decoration(data.get("header"), "header", defaults.header, result)
        footer = self._validate_decoration(data.get("footer"), "footer", defaults.footer, result)
        margins = self._validate_margins(data.get("margins"), defaults.margins, result)

        page_format = data.get("page_format", defaults.page_format)
        if not isinstance(page_format, str) or page_format.upper() not in SUPPORTED_PAGE_FORMATS:
            result.add_error(
                f"page_format must be one of {sorted(SUPPORTED_PAGE_FORMATS)}"
            )

        database_url = audit_data.get("database_url", defaults.database_url)
        if database_url is not None and not isinstance(database_url, str):
            result.add_error("audit.database_url must be a string")

        enable_audit = audit_data.get("enabled", defaults.enable_audit)
        if not isinstance(enable_audit, bool):
            result.add_error("audit.enabled must be a boolean")

        metadata = data.get("metadata", {})
        if not isinstance(metadata, dict):
            result.add_error("metadata must be an object")

        if not result.is_valid:
            return result, None

        configuration = StudioConfiguration(
            assist_endpoint=endpoint.rstrip("/"),
            assist_model=model,
            assist_timeout=float(timeout),
            header=header,
            footer=footer,
            margins=margins,
            page_format=page_format,
            database_url=database_url,
            enable_audit=enable_audit,
            metadata=metadata,
        )
        return result, configuration

    def _validate_decoration(
        self,
        data: Any,
        name: str,
        default: DecorationConfig,
        result: ValidationResult,
    ) -> Optional[DecorationConfig]:
        """Validate a header or footer section."""
        if data is None:
            return default
        if not isinstance(data, dict):
            result.add_error(f"'{name}' must be an object")
            return None

        if "text" in data and not isinstance(data["text"], str):
            result.add_error(f"{name}.text must be a string")
        for field_name in DECORATION_BOOLEAN_FIELDS:
            if field_name in data and not isinstance(data[field_name], bool):
                result.add_error(f"{name}.{field_name} must be a boolean")

        alignment = data.get("alignment", default.alignment.value)
        valid_alignments = [a.value for a in Alignment]
        if alignment not in valid_alignments:
            result.add_error(
                f"{name}.alignment must be one of {valid_alignments}, got '{alignment}'"
            )

        if not result.is_valid:
            return None
        return SessionSerializer.decoration_from_dict(data, default=default)

    def _validate_margins(
        self,
        data: Any,
        default: MarginSpec,
        result: ValidationResult,
    ) -> Optional[MarginSpec]:
        """Validate the margins section, clamping values above the unit maximum."""
        if data is None:
            return default
        if not isinstance(data, dict):
            result.add_error("'margins' must be an object")
            return None

        unit_value = data.get("unit", default.unit.value)
        valid_units = [u.value for u in MarginUnit]
        if unit_value not in valid_units:
            result.add_error(f"margins.unit must be one of {valid_units}, got '{unit_value}'")
            return None

        unit = MarginUnit(unit_value)
        for side in MARGIN_SIDES:
            if side not in data:
                continue
            value = data[side]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                result.add_error(f"margins.{side} must be a number")
            elif value < 0:
                result.add_error(f"margins.{side} must not be negative")
            elif value > MARGIN_LIMITS[unit]:
                result.add_warning(
                    f"margins.{side} ({value}{unit.value}) exceeds "
                    f"{MARGIN_LIMITS[unit]:g}{unit.value} and was clamped"
                )

        if not result.is_valid:
            return None
        return clamp_margins(SessionSerializer.margins_from_dict(data, default=default))

    def _parse_source(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return source

    # =========================================================================
    # Environment overrides
    # =========================================================================

    def apply_environment(self, environ: Optional[Mapping[str, str]] = None) -> StudioConfiguration:
        """
        Apply ``STUDIO_*`` environment overrides to the current configuration.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``.

        Returns:
            The updated configuration.

        Raises:
            ConfigurationError: If an override has an invalid value.
        """
        environ = os.environ if environ is None else environ
        configuration = self._configuration

        endpoint = environ.get(f"{ENV_PREFIX}ASSIST_ENDPOINT")
        if endpoint:
            configuration = replace(configuration, assist_endpoint=endpoint.rstrip("/"))

        model = environ.get(f"{ENV_PREFIX}ASSIST_MODEL")
        if model:
            configuration = replace(configuration, assist_model=model)

        timeout = environ.get(f"{ENV_PREFIX}ASSIST_TIMEOUT")
        if timeout:
            try:
                timeout_value = float(timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_PREFIX}ASSIST_TIMEOUT must be a number, got '{timeout}'"
                ) from e
            if timeout_value <= 0:
                raise ConfigurationError(f"{ENV_PREFIX}ASSIST_TIMEOUT must be positive")
            configuration = replace(configuration, assist_timeout=timeout_value)

        database_url = environ.get(f"{ENV_PREFIX}DATABASE_URL")
        if database_url:
            configuration = replace(configuration, database_url=database_url)

        enable_audit = environ.get(f"{ENV_PREFIX}ENABLE_AUDIT")
        if enable_audit is not None:
            configuration = replace(
                configuration,
                enable_audit=enable_audit.strip().lower() in TRUTHY_VALUES,
            )

        self._configuration = configuration
        return configuration

    # =========================================================================
    # Access
    # =========================================================================

    def create_initial_state(self) -> SessionState:
        """Build the state a new editing session starts from."""
        configuration = self._configuration
        return SessionState(
            header=configuration.header,
            footer=configuration.footer,
            margins=configuration.margins,
            assist=AssistState(
                endpoint=configuration.assist_endpoint,
                model=configuration.assist_model,
            ),
        )

    def save(self, path: Optional[Union[str, Path]] = None) -> None:
        """
        Save the current configuration as JSON.

        Args:
            path: File to write. Uses the constructor path if None.
        """
        path = Path(path) if path else self._config_path
        if not path:
            raise ConfigurationError("No configuration file specified")

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._configuration = StudioConfiguration()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        configuration = self._configuration
        return {
            "assist": {
                "endpoint": configuration.assist_endpoint,
                "model": configuration.assist_model,
                "timeout": configuration.assist_timeout,
            },
            "header": SessionSerializer.decoration_to_dict(configuration.header),
            "footer": SessionSerializer.decoration_to_dict(configuration.footer),
            "margins": SessionSerializer.margins_to_dict(configuration.margins),
            "page_format": configuration.page_format,
            "audit": {
                "enabled": configuration.enable_audit,
                "database_url": configuration.database_url,
            },
            "metadata": configuration.metadata,
        }
