"""Initial state assignment for new documents."""

from typing import Any

from ..errors import UnknownStateError
from .definition import MachineDefinition


class StateInitializer:
    """
    Assigns initial states in two passes.

    The static pass runs before any attributes are assigned to a new
    document; the dynamic pass runs once assignment is complete so that a
    computed initial state can read user input. Both only fill an unset
    attribute, so repeating either pass is a no-op.
    """

    def __init__(self, definition: MachineDefinition):
        self.definition = definition

    def initialize_static(self, document: Any) -> None:
        definition = self.definition
        if definition.initial is None or definition.dynamic_initial:
            return
        if not document.is_new_record():
            return
        if document.read(definition.attribute) is None:
            document.apply_default(definition.attribute, definition.value_for(definition.initial))

    def initialize_dynamic(self, document: Any) -> None:
        definition = self.definition
        if not definition.dynamic_initial:
            return
        if document.read(definition.attribute) is not None:
            return

        # Exceptions raised by the callable propagate to the constructor
        name = definition.initial(document)
        if name not in definition.state_names:
            raise UnknownStateError(
                f"initial state {name!r} is not a known state of {definition.attribute!r}",
                state=name,
                attribute=definition.attribute
            )
        document.apply_default(definition.attribute, definition.value_for(name))
