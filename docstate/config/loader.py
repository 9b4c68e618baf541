"""Configuration loader layering a YAML file over the defaults."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import InvalidConfigurationError
from ..logging.config import get_logger
from .defaults import DefaultConfig, LoggingParams, MessageParams, get_default_config
from .validation import ConfigValidator, format_errors

CONFIG_FILENAME = "docstate.yaml"

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 2-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path.cwd() / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_overrides(self) -> dict[str, Any]:
        """Load overrides from the config file, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            overrides = yaml.safe_load(f)

        return overrides or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 2-tier precedence.

        Priority order:
        1. Explicit overrides, then the config file (highest priority)
        2. Defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_overrides())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Build a DefaultConfig from the merged configuration.

        Raises:
            InvalidConfigurationError: If the merged values fail validation
        """
        config = self.merge_config(overrides)

        validation_errors = ConfigValidator.validate_config(config)
        if validation_errors:
            error_msgs = format_errors(validation_errors)
            logger.error(
                "Configuration validation failed",
                config_dir=str(self.config_dir),
                errors=error_msgs
            )
            raise InvalidConfigurationError(
                f"invalid configuration: {'; '.join(error_msgs)}",
                errors=validation_errors,
                context={"config_dir": str(self.config_dir)}
            )

        return DefaultConfig(
            messages=MessageParams(**config.get("messages", {})),
            logging=LoggingParams(**config.get("logging", {})),
        )

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
