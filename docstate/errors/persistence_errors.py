"""
Persistence error classifications for the reference document host.
"""

from typing import Any, Dict, Optional


class PersistenceError(Exception):
    """Base class for document storage failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class DocumentNotFoundError(PersistenceError):
    """No stored document has the requested id."""

    def __init__(self, message: str, collection: Optional[str] = None,
                 document_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.collection = collection
        self.document_id = document_id


class UnsupportedPredicateError(PersistenceError):
    """A query predicate uses an operator the collection does not support."""

    def __init__(self, message: str, operator: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operator = operator
