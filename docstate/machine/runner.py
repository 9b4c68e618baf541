"""
Event firing for document state machines.

A firing moves through Idle -> Resolving -> (Executing | Rejected) ->
(Applied | Failed). Pending events of every machine on a document are
resolved before any hook runs; the firing applies all of them or none.

Executing is split in two so that it can straddle a host's validation: the
prepare phase runs before hooks and writes the new states, the complete
phase persists and runs after hooks. A prepared firing that is not completed
must be rolled back.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Union

from ..errors import HaltTransition, InvalidEventError, NoMatchingTransitionError
from ..logging.config import get_state_logger, log_state_transition
from .binding import MachineBinding
from .models import FiringResult, FiringStatus, Transition

state_logger = get_state_logger(__name__)

PendingEvent = tuple[MachineBinding, str]


def pending_events(document: Any, bindings: Iterable[MachineBinding]) -> list[PendingEvent]:
    """Events requested through the event attributes of a document."""
    pending = []
    for binding in bindings:
        value = document.read(binding.definition.event_attribute)
        if value is None or value == "":
            continue
        pending.append((binding, str(getattr(value, "value", value))))
    return pending


@dataclass
class PreparedFiring:
    """Transitions already written to a document whose after phase has not run."""

    document: Any
    resolved: list[tuple[MachineBinding, Transition]] = field(default_factory=list)

    @property
    def transitions(self) -> list[Transition]:
        return [transition for _, transition in self.resolved]


class TransitionRunner:
    """Resolves, executes and records the outcome of event firings."""

    def __init__(self):
        self.logger = state_logger

    def fire(
        self,
        document: Any,
        events: Iterable[PendingEvent],
        persist: Optional[Callable[[], bool]] = None
    ) -> FiringResult:
        """
        Fire events on a document.

        Args:
            document: Host document
            events: (binding, event name) pairs, at most one per attribute
            persist: Called after the state is written and before after
                hooks run; a false return rolls the firing back

        Returns:
            FiringResult with the terminal status of the firing
        """
        outcome = self.prepare(document, events)
        if isinstance(outcome, FiringResult):
            return outcome
        return self.complete(outcome, persist)

    def prepare(
        self,
        document: Any,
        events: Iterable[PendingEvent]
    ) -> Union[PreparedFiring, FiringResult]:
        """
        Resolve events, run before hooks and write the target states.

        Returns:
            PreparedFiring when every state was written, otherwise the
            REJECTED or FAILED result
        """
        resolved: list[tuple[MachineBinding, Transition]] = []
        errors: list[tuple[str, str]] = []

        for binding, event in events:
            try:
                resolved.append((binding, self._resolve(document, binding, event)))
            except (NoMatchingTransitionError, InvalidEventError) as failure:
                document.add_error(failure.attribute, str(failure))
                errors.append((failure.attribute, str(failure)))

        if errors:
            # Resolved siblings are dropped along with the rejected event
            for binding, transition in resolved:
                binding.dispatcher.run_after_failure(transition)
                self._log(document, transition.attribute, transition.event, transition.from_state,
                          transition.to_state, FiringStatus.REJECTED, reason="sibling_rejected")
            return FiringResult(
                status=FiringStatus.REJECTED,
                transitions=[transition for _, transition in resolved],
                errors=errors,
            )

        try:
            for binding, transition in resolved:
                binding.dispatcher.run_before(transition)
        except HaltTransition as halt:
            return self._fail(document, resolved, reason=str(halt))

        for binding, transition in resolved:
            transition.apply()
            binding.recorder.record_if_changed(
                document, transition.attribute, transition.from_value, transition.to_value
            )

        return PreparedFiring(document=document, resolved=resolved)

    def complete(
        self,
        prepared: PreparedFiring,
        persist: Optional[Callable[[], bool]] = None
    ) -> FiringResult:
        """Persist a prepared firing, clear its event attributes and run after hooks."""
        document = prepared.document

        if persist is not None and not persist():
            return self.rollback(prepared, reason="persist_failed")

        for binding, _ in prepared.resolved:
            document.write(binding.definition.event_attribute, None)

        for binding, transition in prepared.resolved:
            binding.dispatcher.run_after(transition)
            self._log(document, transition.attribute, transition.event, transition.from_state,
                      transition.to_state, FiringStatus.APPLIED)

        return FiringResult(status=FiringStatus.APPLIED, transitions=prepared.transitions)

    def rollback(self, prepared: PreparedFiring, reason: str) -> FiringResult:
        """Restore the previous states of a prepared firing and run failure hooks."""
        for _, transition in reversed(prepared.resolved):
            transition.rollback()
        return self._fail(prepared.document, prepared.resolved, reason=reason)

    def _resolve(
        self,
        document: Any,
        binding: MachineBinding,
        event: str
    ) -> Transition:
        definition = binding.definition
        attribute = definition.attribute
        value = document.read(attribute)
        current = definition.state_for_value(value)
        from_state = current.name if current else None

        if not definition.table.has_event(event):
            self._log(document, attribute, event, from_state, None, FiringStatus.REJECTED,
                      reason="invalid_event")
            raise InvalidEventError(
                definition.messages.invalid_event,
                attribute=definition.event_attribute,
                event=event
            )

        rules = definition.table.transitions_for(document, event, from_state)
        if not rules:
            self._log(document, attribute, event, from_state, None, FiringStatus.REJECTED,
                      reason="no_matching_transition")
            # Failure hooks see a loopback transition on the current state
            binding.dispatcher.run_after_failure(Transition(
                document=document,
                attribute=attribute,
                event=event,
                from_state=from_state,
                to_state=from_state,
                from_value=value,
                to_value=value,
            ))
            raise NoMatchingTransitionError(
                definition.messages.invalid_transition.format(event=event, state=from_state),
                attribute=attribute,
                event=event,
                from_state=from_state
            )

        # First matching rule in declaration order wins
        rule = rules[0]
        return Transition(
            document=document,
            attribute=attribute,
            event=event,
            from_state=from_state,
            to_state=rule.to_state,
            from_value=value,
            to_value=definition.value_for(rule.to_state),
        )

    def _fail(
        self,
        document: Any,
        resolved: list[tuple[MachineBinding, Transition]],
        reason: str
    ) -> FiringResult:
        for binding, transition in resolved:
            binding.dispatcher.run_after_failure(transition)
            self._log(document, transition.attribute, transition.event, transition.from_state,
                      transition.to_state, FiringStatus.FAILED, reason=reason)

        return FiringResult(
            status=FiringStatus.FAILED,
            transitions=[transition for _, transition in resolved],
        )

    def _log(
        self,
        document: Any,
        attribute: str,
        event: str,
        from_state: Optional[str],
        to_state: Optional[str],
        status: FiringStatus,
        reason: Optional[str] = None
    ) -> None:
        log_state_transition(
            self.logger,
            document_id=getattr(document, "id", None),
            attribute=attribute,
            event=event,
            from_state=from_state,
            to_state=to_state,
            outcome=status.value,
            context={"reason": reason} if reason else None,
        )
