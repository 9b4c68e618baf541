"""
Machine definitions and the builder that validates them.

A MachineDefinition is an immutable value describing one state machine: the
governed attribute, its states, the transition table, the lifecycle action
and the hook registration table. Every configuration error is raised by
MachineBuilder.build(), never while firing.
"""

from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Optional, Union

from ..config.defaults import MessageParams, get_default_config
from ..config.validation import ConfigValidator, format_errors
from ..errors import (
    AmbiguousTransitionError,
    InvalidConfigurationError,
    MachineDefinitionError,
    UnknownEventError,
    UnknownStateError,
)
from .hooks import build_registration, discover_observer_hooks
from .models import Action, HookPhase, HookRegistration, State, TransitionRule
from .table import TransitionTable

InitialState = Union[str, Callable[[Any], str], None]


@dataclass(frozen=True)
class MachineDefinition:
    """Complete, validated configuration of one state machine."""

    attribute: str
    action: Action
    states: tuple[State, ...]
    table: TransitionTable
    hooks: tuple[HookRegistration, ...]
    initial: InitialState = None
    messages: MessageParams = MessageParams()

    @property
    def event_attribute(self) -> str:
        return f"{self.attribute}_event"

    @property
    def state_names(self) -> list[str]:
        return [state.name for state in self.states]

    @property
    def dynamic_initial(self) -> bool:
        return callable(self.initial)

    def state(self, name: str) -> State:
        """Look up a state by name."""
        for state in self.states:
            if state.name == name:
                return state
        raise UnknownStateError(
            f"{name!r} is not a known state of {self.attribute!r}",
            state=name,
            attribute=self.attribute
        )

    def state_for_value(self, value: Any) -> Optional[State]:
        """Look up a state by its stored value."""
        for state in self.states:
            if state.value == value:
                return state
        return None

    def value_for(self, name: str) -> Any:
        return self.state(name).value


class EventBuilder:
    """Collects the transition rules of one event."""

    def __init__(self, name: str):
        self.name = name
        self.rules: list[TransitionRule] = []

    def transition(
        self,
        from_: Union[str, Iterable[str], None] = None,
        to: Optional[str] = None,
        if_: Optional[Callable[[Any], bool]] = None
    ) -> "EventBuilder":
        """
        Add a transition rule.

        Args:
            from_: State name, names, or None for any state
            to: Target state name
            if_: Optional guard called with the document
        """
        if to is None:
            raise MachineDefinitionError(
                f"transition of event {self.name!r} has no target state",
                context={"event": self.name}
            )
        if isinstance(from_, str):
            from_states = frozenset({from_})
        elif from_ is None:
            from_states = None
        else:
            from_states = frozenset(from_)
        self.rules.append(TransitionRule(to_state=to, from_states=from_states, guard=if_))
        return self


class MachineBuilder:
    """Programmatic builder for a MachineDefinition."""

    def __init__(
        self,
        attribute: str = "state",
        *,
        action: Action,
        initial: InitialState = None,
        messages: Optional[MessageParams] = None
    ):
        if not isinstance(action, Action):
            raise MachineDefinitionError(
                f"action must be an Action, got {action!r}",
                context={"attribute": attribute}
            )
        self.attribute = attribute
        self.action = action
        self.initial = initial
        self.messages = messages or get_default_config().messages
        self._states: dict[str, State] = {}
        self._events: dict[str, EventBuilder] = {}
        self._hooks: list[tuple[HookPhase, Callable[..., Any], Any, Any, Any]] = []
        self._observers: list[Any] = []

    def state(self, name: str, value: Any = None) -> "MachineBuilder":
        """Declare a state, optionally with a distinct stored value."""
        self._states[name] = State(name=name, value=value)
        return self

    def event(self, name: str) -> EventBuilder:
        if name not in self._events:
            self._events[name] = EventBuilder(name)
        return self._events[name]

    def before_transition(self, callback, on=None, from_=None, to=None) -> "MachineBuilder":
        self._hooks.append((HookPhase.BEFORE, callback, on, from_, to))
        return self

    def after_transition(self, callback, on=None, from_=None, to=None) -> "MachineBuilder":
        self._hooks.append((HookPhase.AFTER, callback, on, from_, to))
        return self

    def after_failure(self, callback, on=None, from_=None, to=None) -> "MachineBuilder":
        self._hooks.append((HookPhase.AFTER_FAILURE, callback, on, from_, to))
        return self

    def observe(self, observer: Any) -> "MachineBuilder":
        """Register an observer implementing convention-named hook methods."""
        self._observers.append(observer)
        return self

    def build(self) -> MachineDefinition:
        """Validate the collected configuration and freeze it."""
        states = dict(self._states)
        # States referenced by transitions are declared implicitly
        for event in self._events.values():
            for rule in event.rules:
                for name in sorted(rule.from_states or ()) + [rule.to_state]:
                    states.setdefault(name, State(name=name))

        if isinstance(self.initial, str) and self.initial not in states:
            raise UnknownStateError(
                f"initial state {self.initial!r} is not a known state of {self.attribute!r}",
                state=self.initial,
                attribute=self.attribute
            )
        if self.initial is not None and not isinstance(self.initial, str) and not callable(self.initial):
            raise MachineDefinitionError(
                f"initial state of {self.attribute!r} must be a name or a callable",
                context={"initial": repr(self.initial)}
            )

        message_errors = ConfigValidator.validate_messages(asdict(self.messages))
        if message_errors:
            raise InvalidConfigurationError(
                f"messages of {self.attribute!r} are invalid: {'; '.join(format_errors(message_errors))}",
                errors=message_errors,
                context={"attribute": self.attribute}
            )

        values = [state.value for state in states.values()]
        if len(set(map(repr, values))) != len(values):
            raise MachineDefinitionError(
                f"states of {self.attribute!r} share a stored value",
                context={"values": values}
            )

        for event in self._events.values():
            self._check_ambiguity(event)

        hooks = [
            build_registration(phase, callback, on=on, from_=from_, to=to)
            for phase, callback, on, from_, to in self._hooks
        ]
        for registration in hooks:
            self._check_filters(registration, states)
        for observer in self._observers:
            hooks.extend(discover_observer_hooks(
                observer, self.attribute, self._events, states
            ))

        return MachineDefinition(
            attribute=self.attribute,
            action=self.action,
            states=tuple(states.values()),
            table=TransitionTable({name: event.rules for name, event in self._events.items()}),
            hooks=tuple(hooks),
            initial=self.initial,
            messages=self.messages,
        )

    def _check_ambiguity(self, event: EventBuilder) -> None:
        unguarded = [rule for rule in event.rules if rule.guard is None]
        for index, first in enumerate(unguarded):
            for second in unguarded[index + 1:]:
                if first.from_states is None and second.from_states is None:
                    overlap = frozenset({"*"})
                elif first.from_states is None or second.from_states is None:
                    # An empty from-set never matches, so it overlaps nothing
                    overlap = first.from_states if second.from_states is None else second.from_states
                else:
                    overlap = first.from_states & second.from_states
                if overlap:
                    raise AmbiguousTransitionError(
                        f"event {event.name!r} has more than one unguarded transition "
                        f"from {sorted(overlap)}",
                        event=event.name,
                        from_state=sorted(overlap)[0]
                    )

    def _check_filters(self, registration: HookRegistration, states: dict[str, State]) -> None:
        for event in registration.event_filter or ():
            if event not in self._events:
                raise UnknownEventError(
                    f"hook {registration.name} filters on unknown event {event!r}",
                    event=event
                )
        for state in (registration.from_filter or frozenset()) | (registration.to_filter or frozenset()):
            if state not in states:
                raise UnknownStateError(
                    f"hook {registration.name} filters on unknown state {state!r}",
                    state=state,
                    attribute=self.attribute
                )
