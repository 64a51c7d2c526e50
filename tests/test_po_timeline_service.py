import pytest

from parts.models import CommunicationStatus, CommunicationType
from parts.services import po_timeline_service


@pytest.mark.django_db
def test_add_note_and_timeline(po_factory, user):
    po = po_factory()
    po_timeline_service.log_communication(
        po.pk, CommunicationType.PDF_DOWNLOADED, status=CommunicationStatus.SENT
    )
    note = po_timeline_service.add_note(po.pk, "  Supplier called back  ", actor=user)

    assert note.metadata == {"note": "Supplier called back"}
    timeline = po_timeline_service.get_timeline(po.pk)
    assert [e["type"] for e in timeline] == ["note", "pdf_downloaded"]
    first = timeline[0]
    assert first["icon"] == "message"
    assert first["type_display"] == "Note"
    assert first["status_display"] == "Sent"
    assert first["created_by"] == "tester"
    assert timeline[1]["created_by"] is None


@pytest.mark.django_db
def test_empty_note_is_ignored(po_factory):
    po = po_factory()
    assert po_timeline_service.add_note(po.pk, "   ") is None
    assert po_timeline_service.get_timeline(po.pk) == []


@pytest.mark.django_db
def test_log_communication_defaults(po_factory):
    po = po_factory()
    entry = po_timeline_service.log_communication(po.pk, CommunicationType.EMAIL_OPENED)
    assert entry.status == CommunicationStatus.PENDING
    assert entry.metadata == {}
