"""
Machine definition error classifications.

These exceptions are raised while a machine is being defined or registered
and indicate a programming error in the definition itself.
"""

from typing import Any, Dict, Optional


class MachineDefinitionError(Exception):
    """Base class for invalid machine definitions."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class UnknownStateError(MachineDefinitionError):
    """A state name that is not part of the machine's state set."""

    def __init__(self, message: str, state: Optional[str] = None,
                 attribute: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.state = state
        self.attribute = attribute


class UnknownEventError(MachineDefinitionError):
    """An event name that the machine does not define."""

    def __init__(self, message: str, event: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event = event


class AmbiguousTransitionError(MachineDefinitionError):
    """Two unguarded transitions of one event leave the same state."""

    def __init__(self, message: str, event: Optional[str] = None,
                 from_state: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event = event
        self.from_state = from_state


class DuplicateMachineError(MachineDefinitionError):
    """A second machine registered for an attribute that already has one."""

    def __init__(self, message: str, attribute: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.attribute = attribute


class InvalidConfigurationError(MachineDefinitionError):
    """Configuration values that failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
