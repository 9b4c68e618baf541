"""In-memory document collection with membership predicates."""

import threading
import uuid
from typing import Any, Optional

from ..errors import DocumentNotFoundError, UnsupportedPredicateError
from ..logging.config import get_logger

logger = get_logger(__name__)

SUPPORTED_OPERATORS = ("in", "not_in")


class DocumentCollection:
    """Thread-safe in-memory storage of document attribute snapshots."""

    def __init__(self, name: str):
        self.name = name
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def save(self, attributes: dict[str, Any], document_id: Optional[str] = None) -> str:
        """Insert or replace a document snapshot, returning its id."""
        with self._lock:
            if document_id is None:
                document_id = uuid.uuid4().hex
            self._documents[document_id] = dict(attributes)

        logger.debug("Stored document", collection=self.name, document_id=document_id)
        return document_id

    def find(self, document_id: str) -> dict[str, Any]:
        with self._lock:
            if document_id not in self._documents:
                raise DocumentNotFoundError(
                    f"no document {document_id!r} in {self.name!r}",
                    collection=self.name,
                    document_id=document_id
                )
            return dict(self._documents[document_id])

    def where(self, predicate: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
        """
        Documents matching a predicate.

        Each predicate entry maps an attribute either to a plain value
        (equality) or to an {"in": [...]} / {"not_in": [...]} membership test.
        """
        with self._lock:
            snapshot = list(self._documents.items())

        return [
            (document_id, dict(attributes))
            for document_id, attributes in snapshot
            if all(self._matches(attributes.get(attribute), condition)
                   for attribute, condition in predicate.items())
        ]

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()

    def _matches(self, value: Any, condition: Any) -> bool:
        if not isinstance(condition, dict):
            return value == condition

        for operator, operand in condition.items():
            if operator not in SUPPORTED_OPERATORS:
                raise UnsupportedPredicateError(
                    f"unsupported predicate operator {operator!r}",
                    operator=operator
                )
            if operator == "in" and value not in operand:
                return False
            if operator == "not_in" and value in operand:
                return False
        return True
