"""
Transition hook registration and dispatch.

Hooks are held in a static registration table built when a machine is
defined. Observer objects are scanned once at that time: every method name
the naming convention can produce for the machine's events and states is
looked up, and each one found becomes an explicit registration. Dispatch is
a filtered traversal of the table ordered by specificity.
"""

import inspect
from typing import Any, Callable, Iterable, Optional

from ..logging.config import get_hook_logger
from .models import HookPhase, HookRegistration, Transition

hook_logger = get_hook_logger(__name__)


def _filter(values: Any) -> Optional[frozenset]:
    """Normalize a filter argument: None matches anything."""
    if values is None:
        return None
    if isinstance(values, str):
        return frozenset({values})
    return frozenset(values)


def accepts_transition(callback: Callable[..., Any]) -> bool:
    """Whether a callback takes a second positional argument."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return False

    positional = 0
    for parameter in signature.parameters.values():
        if parameter.kind == parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


def build_registration(
    phase: HookPhase,
    callback: Callable[..., Any],
    on: Any = None,
    from_: Any = None,
    to: Any = None,
    attribute_bound: bool = True,
    name: Optional[str] = None,
) -> HookRegistration:
    """Create a registration for a callback with the given filters."""
    return HookRegistration(
        phase=phase,
        callback=callback,
        event_filter=_filter(on),
        from_filter=_filter(from_),
        to_filter=_filter(to),
        attribute_bound=attribute_bound,
        accepts_transition=accepts_transition(callback),
        name=name or getattr(callback, "__qualname__", repr(callback)),
    )


def observer_method_names(
    phase: HookPhase,
    attribute: str,
    event: str,
    from_state: Optional[str],
    to_state: Optional[str],
) -> list[str]:
    """Observer method names for a transition, most specific first."""
    prefix = phase.value
    return [
        f"{prefix}_{event}_from_{from_state}_to_{to_state}",
        f"{prefix}_{event}_from_{from_state}",
        f"{prefix}_{event}_to_{to_state}",
        f"{prefix}_{event}",
        f"{prefix}_transition_{attribute}_from_{from_state}_to_{to_state}",
        f"{prefix}_transition_{attribute}_from_{from_state}",
        f"{prefix}_transition_{attribute}_to_{to_state}",
        f"{prefix}_transition_{attribute}",
        f"{prefix}_transition",
    ]


def discover_observer_hooks(
    observer: Any,
    attribute: str,
    events: Iterable[str],
    states: Iterable[str],
) -> list[HookRegistration]:
    """
    Build registrations for the convention-named methods an observer defines.

    Args:
        observer: Object implementing any of the observer method names
        attribute: State attribute of the machine
        events: Event names of the machine
        states: State names of the machine

    Returns:
        Registrations in discovery order, each with explicit filters
    """
    events = list(events)
    states = list(states)

    # name -> (phase, event, from, to, attribute_bound)
    candidates: dict[str, tuple] = {}
    for phase in HookPhase:
        prefix = phase.value
        for event in events:
            candidates[f"{prefix}_{event}"] = (phase, event, None, None, True)
            for state in states:
                candidates[f"{prefix}_{event}_from_{state}"] = (phase, event, state, None, True)
                candidates[f"{prefix}_{event}_to_{state}"] = (phase, event, None, state, True)
                for target in states:
                    candidates[f"{prefix}_{event}_from_{state}_to_{target}"] = (
                        phase, event, state, target, True)

        candidates[f"{prefix}_transition_{attribute}"] = (phase, None, None, None, True)
        for state in states:
            candidates[f"{prefix}_transition_{attribute}_from_{state}"] = (phase, None, state, None, True)
            candidates[f"{prefix}_transition_{attribute}_to_{state}"] = (phase, None, None, state, True)
            for target in states:
                candidates[f"{prefix}_transition_{attribute}_from_{state}_to_{target}"] = (
                    phase, None, state, target, True)
        candidates[f"{prefix}_transition"] = (phase, None, None, None, False)

    registrations = []
    for method_name, (phase, event, from_state, to_state, bound) in candidates.items():
        method = getattr(observer, method_name, None)
        if not callable(method):
            continue
        registrations.append(build_registration(
            phase,
            method,
            on=event,
            from_=from_state,
            to=to_state,
            attribute_bound=bound,
            name=f"{type(observer).__name__}.{method_name}",
        ))

    return registrations


class HookDispatcher:
    """Runs the registered hooks matching a transition in specificity order."""

    def __init__(self, registrations: Iterable[HookRegistration]):
        self.logger = hook_logger
        self.registrations = tuple(registrations)

    def hooks_for(self, phase: HookPhase, transition: Transition) -> list[HookRegistration]:
        """Matching registrations, most specific first, ties in declaration order."""
        indexed = [
            (registration.rank, index, registration)
            for index, registration in enumerate(self.registrations)
            if registration.phase == phase and registration.matches(transition)
        ]
        indexed.sort(key=lambda item: (item[0], item[1]))
        return [registration for _, _, registration in indexed]

    def run_before(self, transition: Transition) -> None:
        """Run before hooks; a HaltTransition raised by a hook propagates."""
        self._dispatch(HookPhase.BEFORE, transition)

    def run_after(self, transition: Transition) -> None:
        self._dispatch(HookPhase.AFTER, transition)

    def run_after_failure(self, transition: Transition) -> None:
        self._dispatch(HookPhase.AFTER_FAILURE, transition)

    def _dispatch(self, phase: HookPhase, transition: Transition) -> None:
        for registration in self.hooks_for(phase, transition):
            self.logger.debug(
                "Running transition hook",
                hook=registration.name,
                phase=phase.value,
                attribute=transition.attribute,
                transition_event=transition.event,
                from_state=transition.from_state,
                to_state=transition.to_state
            )
            if registration.accepts_transition:
                registration.callback(transition.document, transition)
            else:
                registration.callback(transition.document)
