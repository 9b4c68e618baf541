"""
Error classification for state machine firing, definition and storage.

Recoverable transition failures are converted into validation errors on the
document; definition errors are fatal and surface when a machine is built.
"""

from .transition_failures import (
    TransitionFailure,
    NoMatchingTransitionError,
    HaltTransition,
    InvalidEventError,
)
from .definition_errors import (
    MachineDefinitionError,
    UnknownStateError,
    UnknownEventError,
    AmbiguousTransitionError,
    DuplicateMachineError,
    InvalidConfigurationError,
)
from .persistence_errors import (
    PersistenceError,
    DocumentNotFoundError,
    UnsupportedPredicateError,
)

__all__ = [
    # Transition failures
    "TransitionFailure",
    "NoMatchingTransitionError",
    "HaltTransition",
    "InvalidEventError",
    # Definition errors
    "MachineDefinitionError",
    "UnknownStateError",
    "UnknownEventError",
    "AmbiguousTransitionError",
    "DuplicateMachineError",
    "InvalidConfigurationError",
    # Persistence errors
    "PersistenceError",
    "DocumentNotFoundError",
    "UnsupportedPredicateError",
]
