"""
Reference document type implementing the state machine host contract.

Documents hold declared fields with change tracking against the last stored
snapshot, transient virtual attributes (such as event attributes), a
per-attribute error list, and a save cycle of validation, wrappable persist
and after-save hooks.
"""

import functools
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Optional

from ..logging.config import get_logger
from .collection import DocumentCollection

logger = get_logger(__name__)


@dataclass
class Lifecycle:
    """Hook points of a document type; copied into each subclass."""

    after_defaults: list[Callable[[Any], None]] = field(default_factory=list)
    after_initialize: list[Callable[[Any], None]] = field(default_factory=list)
    before_validation: list[Callable[[Any], None]] = field(default_factory=list)
    around_validation: list[Callable[[Any, Callable[[], bool]], bool]] = field(default_factory=list)
    around_save: list[Callable[[Any, Callable[[], bool]], bool]] = field(default_factory=list)
    after_save: list[Callable[[Any], None]] = field(default_factory=list)
    virtual_attributes: set[str] = field(default_factory=set)

    def copy(self) -> "Lifecycle":
        return Lifecycle(
            after_defaults=list(self.after_defaults),
            after_initialize=list(self.after_initialize),
            before_validation=list(self.before_validation),
            around_validation=list(self.around_validation),
            around_save=list(self.around_save),
            after_save=list(self.after_save),
            virtual_attributes=set(self.virtual_attributes),
        )


class Errors:
    """Validation messages grouped by attribute."""

    def __init__(self):
        self._messages: dict[str, list[str]] = {}

    def add(self, attribute: str, message: str) -> None:
        self._messages.setdefault(attribute, []).append(message)

    def on(self, attribute: str) -> list[str]:
        return list(self._messages.get(attribute, []))

    def clear(self) -> None:
        self._messages.clear()

    def full_messages(self) -> list[str]:
        return [
            f"{attribute.replace('_', ' ').capitalize()} {message}"
            for attribute, messages in self._messages.items()
            for message in messages
        ]

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"


class Document:
    """
    Base class for stored documents.

    Subclasses declare their fields and may override validate() to add
    errors. Assigning a declared field or a virtual attribute goes through
    write(); other attributes behave normally.
    """

    fields: ClassVar[tuple[str, ...]] = ()
    supports_dirty_tracking: ClassVar[bool] = False
    lifecycle: ClassVar[Lifecycle] = Lifecycle()
    collection: ClassVar[DocumentCollection]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.fields = tuple(cls.fields)
        cls.lifecycle = cls.lifecycle.copy()
        if "collection" not in cls.__dict__:
            cls.collection = DocumentCollection(cls.__name__.lower())

    def __init__(self, **attributes: Any):
        self._setup(document_id=None, stored={}, new_record=True)
        for hook in self.lifecycle.after_defaults:
            hook(self)
        self.assign_attributes(attributes)
        for hook in self.lifecycle.after_initialize:
            hook(self)

    def _setup(self, document_id: Optional[str], stored: dict[str, Any], new_record: bool) -> None:
        self.__dict__.update(
            id=document_id,
            changes={},
            errors=Errors(),
            _attributes={name: stored.get(name) for name in self.fields},
            _stored=dict(stored),
            _transient={name: None for name in self.lifecycle.virtual_attributes},
            _new_record=new_record,
        )

    @classmethod
    def define_field(cls, name: str) -> None:
        if name not in cls.fields:
            cls.fields = cls.fields + (name,)

    @classmethod
    def create(cls, **attributes: Any) -> "Document":
        document = cls(**attributes)
        document.save()
        return document

    @classmethod
    def instantiate(cls, document_id: str, stored: dict[str, Any]) -> "Document":
        """Build a document from storage without running initialization hooks."""
        document = cls.__new__(cls)
        document._setup(document_id=document_id, stored=stored, new_record=False)
        return document

    @classmethod
    def find(cls, document_id: str) -> "Document":
        return cls.instantiate(document_id, cls.collection.find(document_id))

    @classmethod
    def where(cls, predicate: dict[str, Any]) -> list["Document"]:
        return [
            cls.instantiate(document_id, stored)
            for document_id, stored in cls.collection.where(predicate)
        ]

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        attributes = self.__dict__.get("_attributes")
        if attributes is not None and name in attributes:
            return attributes[name]
        transient = self.__dict__.get("_transient")
        if transient is not None and name in self.lifecycle.virtual_attributes:
            return transient.get(name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.fields or name in self.lifecycle.virtual_attributes:
            self.write(name, value)
        else:
            super().__setattr__(name, value)

    def read(self, attribute: str) -> Any:
        if attribute in self._attributes:
            return self._attributes[attribute]
        if attribute in self.lifecycle.virtual_attributes:
            return self._transient.get(attribute)
        raise AttributeError(f"{type(self).__name__} has no attribute {attribute!r}")

    def write(self, attribute: str, value: Any) -> None:
        if attribute in self._attributes:
            self._attributes[attribute] = value
            self._track(attribute)
        elif attribute in self.lifecycle.virtual_attributes:
            self._transient[attribute] = value
        else:
            raise AttributeError(f"{type(self).__name__} has no attribute {attribute!r}")

    def apply_default(self, attribute: str, value: Any) -> None:
        """Set a field without recording a change."""
        self._attributes[attribute] = value

    def assign_attributes(self, attributes: dict[str, Any]) -> None:
        for name, value in attributes.items():
            self.write(name, value)

    def changed(self, attribute: str) -> bool:
        return attribute in self.changes

    def attribute_will_change(self, attribute: str) -> None:
        """Flag a field as changed even if its value ends up the same."""
        if attribute not in self.changes:
            self.changes[attribute] = (self._stored.get(attribute), self._attributes.get(attribute))

    def add_error(self, attribute: str, message: str) -> None:
        self.errors.add(attribute, message)

    def is_new_record(self) -> bool:
        return self._new_record

    def validate(self) -> None:
        """Override to add errors for invalid attribute values."""

    def valid(self) -> bool:
        self.errors.clear()
        for hook in self.lifecycle.before_validation:
            hook(self)

        run = self._run_validations
        for wrapper in reversed(self.lifecycle.around_validation):
            run = functools.partial(wrapper, self, run)
        return run()

    def save(self) -> bool:
        if not self.valid():
            logger.debug("Document invalid, skipping save", document_id=self.id, errors=repr(self.errors))
            return False

        persist = self._persist
        for wrapper in reversed(self.lifecycle.around_save):
            persist = functools.partial(wrapper, self, persist)
        if not persist():
            return False

        for hook in self.lifecycle.after_save:
            hook(self)
        return True

    def reload(self) -> "Document":
        stored = self.collection.find(self.id)
        self.__dict__.update(
            changes={},
            errors=Errors(),
            _attributes={name: stored.get(name) for name in self.fields},
            _stored=dict(stored),
        )
        return self

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)

    def _run_validations(self) -> bool:
        self.validate()
        return not self.errors

    def _persist(self) -> bool:
        document_id = self.collection.save(self._attributes, self.id)
        self.__dict__.update(
            id=document_id,
            changes={},
            _stored=dict(self._attributes),
            _new_record=False,
        )
        return True

    def _track(self, attribute: str) -> None:
        stored = self._stored.get(attribute)
        value = self._attributes[attribute]
        if value != stored:
            self.changes[attribute] = (stored, value)
        else:
            self.changes.pop(attribute, None)

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}: {value!r}" for name, value in self._attributes.items())
        return f"#<{type(self).__name__} id: {self.id!r}, {fields}>"
