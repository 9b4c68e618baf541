"""
Change recording for documents whose state changed through a transition.

Persistence hooks that only run for changed attributes must still run after a
transition fires, including loopback transitions where the stored value does
not change. Hosts with native dirty tracking are told the attribute will
change; for other hosts a change entry is forced into the document's change
set.
"""

from typing import Any, Optional

from ..logging.config import get_logger
from .models import ChangeRecord, DirtyTracking

logger = get_logger(__name__)


class ChangeRecorder:
    """Surfaces transition writes through the host's change detection."""

    def __init__(self, tracking: DirtyTracking):
        self.tracking = tracking

    def record_if_changed(
        self,
        document: Any,
        attribute: str,
        old: Any,
        new: Any
    ) -> Optional[ChangeRecord]:
        """
        Make the host report the attribute as changed after a transition.

        Returns:
            The forced record, or None when the host already reports the
            change or tracks it natively
        """
        if self.tracking == DirtyTracking.NATIVE:
            document.attribute_will_change(attribute)
            return None

        if document.changed(attribute):
            return None

        record = ChangeRecord(attribute=attribute, old_value=old, new_value=new)
        document.changes[attribute] = (old, new)
        logger.debug(
            "Forced change record",
            attribute=attribute,
            old_value=old,
            new_value=new
        )
        return record
