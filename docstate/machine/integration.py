"""
Explicit composition of state machines into a host document type.

A host type owns one MachineRegistry (class-level operations: registering
machines, listing them, initializing states, state scopes) and exposes
InstanceOperations for per-document operations such as firing an event.
"""

from typing import Any, Optional

from ..errors import DuplicateMachineError, MachineDefinitionError
from ..logging.config import get_logger
from .actions import ActionBinder
from .binding import MachineBinding
from .definition import MachineDefinition
from .models import Action, FiringResult
from .runner import TransitionRunner

logger = get_logger(__name__)


class MachineRegistry:
    """Class-level state machine operations for one host document type."""

    def __init__(self, host_cls: type):
        self.host_cls = host_cls
        self._bindings: dict[str, MachineBinding] = {}
        self.runner = TransitionRunner()
        self.binder = ActionBinder(self.runner, lambda: list(self._bindings.values()))

        host_cls.lifecycle.after_defaults.append(self.initialize_static)
        host_cls.lifecycle.after_initialize.append(self.initialize_dynamic)

    def register(self, definition: MachineDefinition) -> MachineBinding:
        """Bind a machine definition to the host type."""
        attribute = definition.attribute
        if attribute in self._bindings:
            raise DuplicateMachineError(
                f"{self.host_cls.__name__} already has a machine for {attribute!r}",
                attribute=attribute
            )

        if attribute not in self.host_cls.fields:
            self.host_cls.define_field(attribute)
        self.host_cls.lifecycle.virtual_attributes.add(definition.event_attribute)

        binding = MachineBinding.bind(definition, self.host_cls)
        self._bindings[attribute] = binding
        self.binder.bind(self.host_cls, definition.action)

        logger.info(
            "Registered state machine",
            host=self.host_cls.__name__,
            attribute=attribute,
            action=definition.action.value,
            dirty_tracking=binding.tracking.value,
            states=definition.state_names,
            events=definition.table.events
        )
        return binding

    def machines(self) -> list[MachineDefinition]:
        return [binding.definition for binding in self._bindings.values()]

    def bindings(self) -> list[MachineBinding]:
        return list(self._bindings.values())

    def binding(self, attribute: str = "state") -> MachineBinding:
        if attribute not in self._bindings:
            raise MachineDefinitionError(
                f"{self.host_cls.__name__} has no machine for {attribute!r}",
                context={"attribute": attribute}
            )
        return self._bindings[attribute]

    def initialize_static(self, document: Any) -> None:
        for binding in self._bindings.values():
            binding.initializer.initialize_static(document)

    def initialize_dynamic(self, document: Any) -> None:
        for binding in self._bindings.values():
            binding.initializer.initialize_dynamic(document)

    def initialize_states(self, document: Any, static: bool = True, dynamic: bool = True) -> None:
        """Run the requested initialization passes on a document."""
        if static:
            self.initialize_static(document)
        if dynamic:
            self.initialize_dynamic(document)

    def with_states(self, *names: str, attribute: str = "state") -> list[Any]:
        """Stored documents currently in any of the named states."""
        binding = self.binding(attribute)
        values = [binding.definition.value_for(name) for name in names]
        return self.host_cls.where(binding.scopes.with_states(values))

    def without_states(self, *names: str, attribute: str = "state") -> list[Any]:
        """Stored documents in none of the named states."""
        binding = self.binding(attribute)
        values = [binding.definition.value_for(name) for name in names]
        return self.host_cls.where(binding.scopes.without_states(values))

    with_state = with_states
    without_state = without_states


class InstanceOperations:
    """Per-document state machine operations."""

    def __init__(self, registry: MachineRegistry):
        self.registry = registry

    def state_name(self, document: Any, attribute: str = "state") -> Optional[str]:
        definition = self.registry.binding(attribute).definition
        state = definition.state_for_value(document.read(attribute))
        return state.name if state else None

    def is_state(self, document: Any, name: str, attribute: str = "state") -> bool:
        definition = self.registry.binding(attribute).definition
        return document.read(attribute) == definition.value_for(name)

    def available_events(self, document: Any, attribute: str = "state") -> list[str]:
        definition = self.registry.binding(attribute).definition
        return definition.table.events_from(document, self.state_name(document, attribute))

    def can_fire(self, document: Any, event: str, attribute: str = "state") -> bool:
        return event in self.available_events(document, attribute)

    def fire(self, document: Any, event: str, attribute: str = "state") -> FiringResult:
        """
        Fire an event immediately.

        Machines bound to the save action persist the document as part of
        the firing and roll the state back if the save fails. Machines bound
        to the validate action only change the in-memory state.
        """
        binding = self.registry.binding(attribute)
        persist = document.save if binding.definition.action == Action.SAVE else None
        return self.registry.runner.fire(document, [(binding, event)], persist=persist)
