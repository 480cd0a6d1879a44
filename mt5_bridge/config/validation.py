"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import HttpParams, LoggingParams, QueryParams, SocketParams

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SECTIONS = {
    "socket": SocketParams,
    "http": HttpParams,
    "query": QueryParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_listener_params(section: str, params: dict[str, Any]) -> list[ValidationError]:
        """Validate host/port parameters shared by the socket and HTTP listeners."""
        errors = []

        if "host" in params:
            value = params["host"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field=f"{section}.host",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "port" in params:
            value = params["port"]
            if not _is_int(value) or value < 1 or value > 65535:
                errors.append(ValidationError(
                    field=f"{section}.port",
                    message="Must be an integer between 1 and 65535",
                    value=value
                ))

        if "read_size" in params:
            value = params["read_size"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field=f"{section}.read_size",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_query_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate query surface parameters."""
        errors = []

        for name in ("default_candle_limit", "default_requested_bars"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=f"query.{name}",
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="logging.format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_structure(config: dict[str, Any]) -> list[ValidationError]:
        """Reject unknown sections and unknown keys within known sections."""
        errors = []

        for section, params in config.items():
            if section not in SECTIONS:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=params
                ))
                continue

            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue

            known = {f.name for f in fields(SECTIONS[section])}
            for key in params:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown configuration key",
                        value=params[key]
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = ConfigValidator.validate_structure(config)
        if errors:
            return errors

        if "socket" in config:
            errors.extend(ConfigValidator.validate_listener_params("socket", config["socket"]))

        if "http" in config:
            errors.extend(ConfigValidator.validate_listener_params("http", config["http"]))

        if "query" in config:
            errors.extend(ConfigValidator.validate_query_params(config["query"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
