"""
Transition failure classifications for event firing.

These exceptions describe expected outcomes of firing an event that does not
apply. The runner converts them into validation errors on the document; they
never escape to the caller of save or validate.
"""

from typing import Any, Dict, Optional


class TransitionFailure(Exception):
    """Base class for firing failures that are reported on the document."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class NoMatchingTransitionError(TransitionFailure):
    """No transition of the event matches the current state and guards."""

    def __init__(self, message: str, attribute: Optional[str] = None,
                 event: Optional[str] = None, from_state: Optional[str] = None,
                 **kwargs):
        super().__init__(message, **kwargs)
        self.attribute = attribute
        self.event = event
        self.from_state = from_state


class HaltTransition(TransitionFailure):
    """Raised by a before hook to abort the transition in progress."""

    def __init__(self, message: str = "transition halted", **kwargs):
        super().__init__(message, **kwargs)


class InvalidEventError(TransitionFailure):
    """The event attribute names an event the machine does not define."""

    def __init__(self, message: str, attribute: Optional[str] = None,
                 event: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.attribute = attribute
        self.event = event
