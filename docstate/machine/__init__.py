"""
State machine core and document lifecycle integration.

Resolves events against a transition table, dispatches transition hooks and
binds firing to a host document's validate or save phase.
"""

from ..errors import HaltTransition
from .definition import EventBuilder, MachineBuilder, MachineDefinition
from .integration import InstanceOperations, MachineRegistry
from .models import (
    Action,
    ChangeRecord,
    DirtyTracking,
    FiringResult,
    FiringStatus,
    HookPhase,
    HookRegistration,
    State,
    Transition,
    TransitionRule,
)

__all__ = [
    "Action",
    "ChangeRecord",
    "DirtyTracking",
    "EventBuilder",
    "FiringResult",
    "FiringStatus",
    "HaltTransition",
    "HookPhase",
    "HookRegistration",
    "InstanceOperations",
    "MachineBuilder",
    "MachineDefinition",
    "MachineRegistry",
    "State",
    "Transition",
    "TransitionRule",
]
