"""Tests for change recording after transitions."""

from unittest.mock import Mock

from docstate import Document
from docstate.machine.changes import ChangeRecorder
from docstate.machine.models import ChangeRecord, DirtyTracking


class Plain(Document):
    fields = ("state",)


class Tracked(Document):
    fields = ("state",)
    supports_dirty_tracking = True


class TestDirtyTrackingFlag:
    """Test the host capability flag."""

    def test_flag_resolved_from_host_type(self):
        assert DirtyTracking.for_host(Plain) == DirtyTracking.EMULATED
        assert DirtyTracking.for_host(Tracked) == DirtyTracking.NATIVE
        assert DirtyTracking.for_host(object) == DirtyTracking.EMULATED


class TestChangeRecorder:
    """Test ChangeRecorder.record_if_changed."""

    def test_loopback_forces_change_record(self):
        """Test that an unchanged value is still reported after a transition."""
        document = Plain.instantiate("doc-1", {"state": "idling"})
        recorder = ChangeRecorder(DirtyTracking.EMULATED)

        document.write("state", "idling")
        assert document.changed("state") is False

        record = recorder.record_if_changed(document, "state", "idling", "idling")

        assert record == ChangeRecord("state", "idling", "idling")
        assert document.changed("state") is True
        assert document.changes["state"] == ("idling", "idling")

    def test_existing_change_left_alone(self):
        """Test that a change the host already reports is not overwritten."""
        document = Plain.instantiate("doc-1", {"state": "parked"})
        recorder = ChangeRecorder(DirtyTracking.EMULATED)

        document.write("state", "idling")
        record = recorder.record_if_changed(document, "state", "parked", "idling")

        assert record is None
        assert document.changes["state"] == ("parked", "idling")

    def test_native_tracking_delegates(self):
        """Test that native hosts are told the attribute will change."""
        document = Mock()
        recorder = ChangeRecorder(DirtyTracking.NATIVE)

        record = recorder.record_if_changed(document, "state", "idling", "idling")

        assert record is None
        document.attribute_will_change.assert_called_once_with("state")
        document.changed.assert_not_called()

    def test_native_host_reports_loopback(self):
        """Test the reference host's native primitive."""
        document = Tracked.instantiate("doc-1", {"state": "idling"})
        recorder = ChangeRecorder(DirtyTracking.NATIVE)

        recorder.record_if_changed(document, "state", "idling", "idling")

        assert document.changed("state") is True

    def test_records_cleared_by_save_and_reload(self):
        """Test that forced records only last for one save cycle."""
        document = Plain(state="idling")
        document.save()
        recorder = ChangeRecorder(DirtyTracking.EMULATED)

        recorder.record_if_changed(document, "state", "idling", "idling")
        document.save()
        assert document.changed("state") is False

        recorder.record_if_changed(document, "state", "idling", "idling")
        document.reload()
        assert document.changed("state") is False
