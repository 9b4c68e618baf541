"""Transition table mapping (state, event) to guarded target states."""

from typing import Any, Iterable, Mapping, Optional

from .models import TransitionRule


class TransitionTable:
    """Ordered transition rules per event, in declaration order."""

    def __init__(self, events: Mapping[str, Iterable[TransitionRule]]):
        self._events: dict[str, tuple[TransitionRule, ...]] = {
            name: tuple(rules) for name, rules in events.items()
        }

    @property
    def events(self) -> list[str]:
        return list(self._events)

    def has_event(self, event: str) -> bool:
        return event in self._events

    def rules(self, event: str) -> tuple[TransitionRule, ...]:
        return self._events.get(event, ())

    def transitions_for(
        self,
        document: Any,
        event: str,
        state: Optional[str]
    ) -> list[TransitionRule]:
        """
        Rules of an event that leave the given state and whose guard passes.

        Guards are only evaluated for rules whose from-states match, and are
        evaluated in declaration order. The first entry of the result is the
        rule a firing selects.
        """
        return [
            rule for rule in self.rules(event)
            if rule.matches(state) and rule.allows(document)
        ]

    def events_from(self, document: Any, state: Optional[str]) -> list[str]:
        """Events with at least one applicable rule from the given state."""
        return [
            event for event in self._events
            if self.transitions_for(document, event, state)
        ]
