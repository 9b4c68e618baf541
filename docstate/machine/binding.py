"""Per-host composition of a machine definition with its components."""

from dataclasses import dataclass

from .changes import ChangeRecorder
from .definition import MachineDefinition
from .hooks import HookDispatcher
from .initializer import StateInitializer
from .models import DirtyTracking
from .scopes import ScopeBuilder


@dataclass(frozen=True)
class MachineBinding:
    """A machine definition bound to one host document type."""

    definition: MachineDefinition
    tracking: DirtyTracking
    dispatcher: HookDispatcher
    recorder: ChangeRecorder
    initializer: StateInitializer
    scopes: ScopeBuilder

    @classmethod
    def bind(cls, definition: MachineDefinition, host_cls: type) -> "MachineBinding":
        """Create the components, resolving host capabilities once."""
        tracking = DirtyTracking.for_host(host_cls)
        return cls(
            definition=definition,
            tracking=tracking,
            dispatcher=HookDispatcher(definition.hooks),
            recorder=ChangeRecorder(tracking),
            initializer=StateInitializer(definition),
            scopes=ScopeBuilder(definition.attribute),
        )

    @property
    def attribute(self) -> str:
        return self.definition.attribute
