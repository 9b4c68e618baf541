"""Configuration validation utilities."""

import string
from dataclasses import dataclass
from typing import Any

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRANSITION_PLACEHOLDERS = frozenset({"event", "state"})


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_messages(params: dict[str, Any]) -> list[ValidationError]:
        """Validate failure message templates."""
        errors = []

        if "invalid_event" in params:
            value = params["invalid_event"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="invalid_event",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "invalid_transition" in params:
            value = params["invalid_transition"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="invalid_transition",
                    message="Must be a non-empty string",
                    value=value
                ))
            else:
                try:
                    names = {
                        name for _, name, _, _ in string.Formatter().parse(value)
                        if name is not None
                    }
                except ValueError:
                    names = None
                if names is None or not names <= TRANSITION_PLACEHOLDERS:
                    errors.append(ValidationError(
                        field="invalid_transition",
                        message="May only use the {event} and {state} placeholders",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        for flag in ("format_json", "include_timestamp"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=flag,
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete merged configuration."""
        errors = []
        errors.extend(cls.validate_messages(config.get("messages", {})))
        errors.extend(cls.validate_logging(config.get("logging", {})))
        return errors


def format_errors(errors: list[ValidationError]) -> list[str]:
    """Render validation errors as 'field: message (got: value)' lines."""
    return [f"{err.field}: {err.message} (got: {err.value!r})" for err in errors]
