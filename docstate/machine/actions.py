"""
Lifecycle binding of pending event firings.

Machines with the validate action fire their pending events before the
host's validation runs. Machines with the save action split their firing
around validation and persistence: before hooks run and the new states are
written before validation, so validators see the target state; the persist
step and after hooks run in the save. A failed validation rolls the written
states back.
"""

import weakref
from typing import Any, Callable, Iterable, Union

from ..logging.config import get_state_logger
from .binding import MachineBinding
from .models import Action, DirtyTracking, FiringResult
from .runner import PreparedFiring, TransitionRunner, pending_events

state_logger = get_state_logger(__name__)

Outcome = Union[PreparedFiring, FiringResult]


class ActionBinder:
    """Installs firing hooks into a host document type's lifecycle."""

    def __init__(self, runner: TransitionRunner, bindings: Callable[[], Iterable[MachineBinding]]):
        self.logger = state_logger
        self.runner = runner
        self._bindings = bindings
        self._bound: set[Action] = set()
        # Save-time firings begun during validation, awaiting the save
        self._pending: "weakref.WeakKeyDictionary[Any, Outcome]" = weakref.WeakKeyDictionary()

    def bind(self, host_cls: type, action: Action) -> None:
        """Install the hooks for an action once per host type."""
        if action in self._bound:
            return

        lifecycle = host_cls.lifecycle
        if self.around_validation not in lifecycle.around_validation:
            lifecycle.around_validation.append(self.around_validation)
        if action == Action.SAVE:
            # Outermost wrapper so the firing surrounds every other save hook
            lifecycle.around_save.insert(0, self.around_save)

        self._bound.add(action)
        self.logger.debug(
            "Bound machine action",
            host=host_cls.__name__,
            action=action.value
        )

    def bindings_for(self, action: Action) -> list[MachineBinding]:
        return [binding for binding in self._bindings() if binding.definition.action == action]

    def around_validation(self, document: Any, proceed: Callable[[], bool]) -> bool:
        """Fire validate-time events and begin save-time events before validation runs."""
        bindings = [
            binding for binding in self.bindings_for(Action.VALIDATE)
            if binding.tracking != DirtyTracking.NATIVE or not document.changed(binding.attribute)
        ]
        events = pending_events(document, bindings)
        if events:
            # Failures are reported as errors on the document
            self.runner.fire(document, events)

        self._begin_save_firing(document)

        valid = proceed()
        if not valid:
            outcome = self._pending.pop(document, None)
            if isinstance(outcome, PreparedFiring):
                self.runner.rollback(outcome, reason="validation_failed")
        return valid

    def around_save(self, document: Any, proceed: Callable[[], bool]) -> bool:
        """Persist save-time firings begun during validation, then run their after hooks."""
        outcome = self._pending.pop(document, None)
        if outcome is None:
            events = pending_events(document, self.bindings_for(Action.SAVE))
            if not events:
                return proceed()
            return self.runner.fire(document, events, persist=proceed).applied

        if isinstance(outcome, FiringResult):
            # Halted by a before hook during validation
            return False
        return self.runner.complete(outcome, persist=proceed).applied

    def _begin_save_firing(self, document: Any) -> None:
        if isinstance(self._pending.get(document), PreparedFiring):
            # States were already written by an earlier validation
            return
        self._pending.pop(document, None)

        events = pending_events(document, self.bindings_for(Action.SAVE))
        if not events:
            return

        outcome = self.runner.prepare(document, events)
        if isinstance(outcome, PreparedFiring) or not outcome.errors:
            self._pending[document] = outcome
