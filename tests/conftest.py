"""Pytest configuration and shared fixtures."""

from typing import Callable, Optional

import pytest

from docstate import Action, Document, InstanceOperations, MachineBuilder, MachineRegistry


def build_vehicle_class(
    action: Action = Action.SAVE,
    configure: Optional[Callable[[MachineBuilder], None]] = None,
    native_tracking: bool = False,
    initial="parked",
) -> type:
    """
    Build a fresh Vehicle document type with a state machine on 'state'.

    parked --ignite--> idling --shift_up--> first_gear
    idling/first_gear --park--> parked
    idling --idle--> idling (loopback)
    """
    vehicle_cls = type("Vehicle", (Document,), {
        "fields": ("name", "seatbelt_on"),
        "supports_dirty_tracking": native_tracking,
    })

    builder = MachineBuilder("state", action=action, initial=initial)
    builder.event("ignite").transition(from_="parked", to="idling")
    builder.event("park").transition(from_=["idling", "first_gear"], to="parked")
    builder.event("shift_up").transition(from_="idling", to="first_gear")
    builder.event("idle").transition(from_="idling", to="idling")
    if configure:
        configure(builder)

    vehicle_cls.machines = MachineRegistry(vehicle_cls)
    vehicle_cls.machines.register(builder.build())
    vehicle_cls.operations = InstanceOperations(vehicle_cls.machines)
    return vehicle_cls


@pytest.fixture
def vehicle_factory() -> Callable[..., type]:
    """Factory building Vehicle document types with custom machine options."""
    return build_vehicle_class


@pytest.fixture
def vehicle_cls() -> type:
    """Vehicle document type whose machine fires around save."""
    return build_vehicle_class(action=Action.SAVE)


@pytest.fixture
def validating_vehicle_cls() -> type:
    """Vehicle document type whose machine fires before validation."""
    return build_vehicle_class(action=Action.VALIDATE)
