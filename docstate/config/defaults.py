"""Default configuration parameters for docstate."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MessageParams:
    """Validation messages attached to documents when a firing fails."""
    # Added to the event attribute when it names an unknown event
    invalid_event: str = "is invalid"

    # Added to the state attribute when no transition applies
    # Placeholders: {event}, {state}
    invalid_transition: str = 'cannot transition via "{event}" from "{state}"'


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters passed to configure_logging."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    messages: MessageParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        messages=MessageParams(),
        logging=LoggingParams(),
    )
