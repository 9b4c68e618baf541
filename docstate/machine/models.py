"""
State machine data models for document-bound state machines.

This module defines the configuration values (states, transition rules, hook
registrations) and the per-firing runtime values (transitions, change records,
firing results) shared by the machine components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, FrozenSet, Optional


class Action(str, Enum):
    """Document lifecycle phase a machine binds its automatic firing to."""
    VALIDATE = "validate"
    SAVE = "save"


class DirtyTracking(str, Enum):
    """How the host reports changed attributes."""
    NATIVE = "native"
    EMULATED = "emulated"

    @classmethod
    def for_host(cls, host_cls: type) -> "DirtyTracking":
        """Resolve the capability flag once, when a machine binds to a host type."""
        if getattr(host_cls, "supports_dirty_tracking", False):
            return cls.NATIVE
        return cls.EMULATED


class HookPhase(str, Enum):
    """Hook phases; the value is the prefix of observer method names."""
    BEFORE = "before"
    AFTER = "after"
    AFTER_FAILURE = "after_failure_to"


class FiringStatus(str, Enum):
    """Terminal outcome of a single firing."""
    APPLIED = "applied"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class State:
    """A named state and the value stored in the document attribute."""
    name: str
    value: Any = None

    def __post_init__(self) -> None:
        if self.value is None:
            object.__setattr__(self, "value", self.name)


@dataclass(frozen=True)
class TransitionRule:
    """One transition of an event: from-states, target state and guard."""

    to_state: str
    from_states: Optional[FrozenSet[str]] = None    # None matches any state
    guard: Optional[Callable[[Any], bool]] = None

    def matches(self, state: Optional[str]) -> bool:
        """Check whether the rule leaves the given state."""
        return self.from_states is None or state in self.from_states

    def allows(self, document: Any) -> bool:
        """Evaluate the guard; exceptions raised by the guard propagate."""
        return self.guard is None or bool(self.guard(document))


@dataclass
class Transition:
    """A resolved transition for one document attribute."""

    document: Any
    attribute: str
    event: str
    from_state: Optional[str]
    to_state: str
    from_value: Any = None
    to_value: Any = None

    @property
    def loopback(self) -> bool:
        """Whether the transition leaves the state unchanged."""
        return self.from_state == self.to_state

    def apply(self) -> None:
        """Write the target value to the document."""
        self.document.write(self.attribute, self.to_value)

    def rollback(self) -> None:
        """Restore the value the document held before the transition."""
        self.document.write(self.attribute, self.from_value)


@dataclass(frozen=True)
class ChangeRecord:
    """A forced change entry for an attribute within one save cycle."""
    attribute: str
    old_value: Any
    new_value: Any


# Specificity rank keyed by which filters are set: (event, from, to)
_FILTER_RANKS = {
    (True, True, True): 0,
    (True, True, False): 1,
    (True, False, True): 2,
    (True, False, False): 3,
    (False, True, True): 4,
    (False, True, False): 5,
    (False, False, True): 6,
}


@dataclass(frozen=True)
class HookRegistration:
    """A transition hook with explicit event, from and to filters."""

    phase: HookPhase
    callback: Callable[..., Any]
    event_filter: Optional[FrozenSet[str]] = None
    from_filter: Optional[FrozenSet[str]] = None
    to_filter: Optional[FrozenSet[str]] = None
    attribute_bound: bool = True
    accepts_transition: bool = False
    name: str = ""

    @property
    def rank(self) -> int:
        """Specificity rank, lower runs first."""
        key = (
            self.event_filter is not None,
            self.from_filter is not None,
            self.to_filter is not None,
        )
        if key in _FILTER_RANKS:
            return _FILTER_RANKS[key]
        return 7 if self.attribute_bound else 8

    def matches(self, transition: Transition) -> bool:
        """Check the registration's filters against a transition."""
        if self.event_filter is not None and transition.event not in self.event_filter:
            return False
        if self.from_filter is not None and transition.from_state not in self.from_filter:
            return False
        if self.to_filter is not None and transition.to_state not in self.to_filter:
            return False
        return True


@dataclass
class FiringResult:
    """Outcome of firing one or more events on a document."""

    status: FiringStatus
    transitions: list[Transition] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return self.status == FiringStatus.APPLIED

    def __bool__(self) -> bool:
        return self.applied
