"""
docstate - State machines bound to document lifecycles

Governs a document field with named states and events. Firing an event
resolves a transition table, runs before/after/failure hooks, and ties the
state change to the document's validate or save phase.
"""

from .machine import (
    Action,
    DirtyTracking,
    FiringResult,
    FiringStatus,
    HaltTransition,
    InstanceOperations,
    MachineBuilder,
    MachineDefinition,
    MachineRegistry,
    State,
    Transition,
)
from .persistence import Document, DocumentCollection

__version__ = "0.1.0"

__all__ = [
    "Action",
    "DirtyTracking",
    "Document",
    "DocumentCollection",
    "FiringResult",
    "FiringStatus",
    "HaltTransition",
    "InstanceOperations",
    "MachineBuilder",
    "MachineDefinition",
    "MachineRegistry",
    "State",
    "Transition",
]
