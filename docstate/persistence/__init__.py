"""
Reference document host.

An in-memory document type and collection implementing the host contract the
state machine integration binds to: attribute read/write with change
tracking, error reporting, a validation hook point and a wrappable save.
"""

from .collection import DocumentCollection
from ..errors import DocumentNotFoundError
from .document import Document, Errors, Lifecycle

__all__ = ["Document", "DocumentCollection", "DocumentNotFoundError", "Errors", "Lifecycle"]
