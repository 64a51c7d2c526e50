"""Communication timeline for purchase orders."""

import logging
from typing import Any, Dict, List, Optional

from parts.models import (
    CommunicationStatus,
    CommunicationType,
    PurchaseOrderCommunication,
)

logger = logging.getLogger(__name__)

ICONS = {
    CommunicationType.EMAIL_SENT: "mail",
    CommunicationType.EMAIL_OPENED: "mail-open",
    CommunicationType.EMAIL_BOUNCED: "mail-x",
    CommunicationType.PDF_DOWNLOADED: "download",
    CommunicationType.STATUS_CHANGE: "refresh",
    CommunicationType.NOTE: "message",
}


def log_communication(
    po_id: int,
    communication_type: str,
    status: str = CommunicationStatus.PENDING,
    subject: Optional[str] = None,
    recipient_email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    actor=None,
) -> PurchaseOrderCommunication:
    entry = PurchaseOrderCommunication.objects.create(
        purchase_order_id=po_id,
        communication_type=communication_type,
        status=status,
        subject=subject,
        recipient_email=recipient_email,
        metadata=metadata or {},
        created_by=actor if getattr(actor, "is_authenticated", False) else None,
    )
    logger.debug("Logged %s for PO %s", communication_type, po_id)
    return entry


def add_note(po_id: int, note: str, actor=None) -> Optional[PurchaseOrderCommunication]:
    note = (note or "").strip()
    if not note:
        return None
    return log_communication(
        po_id,
        CommunicationType.NOTE,
        status=CommunicationStatus.SENT,
        subject=note[:255],
        metadata={"note": note},
        actor=actor,
    )


def get_timeline(po_id: int) -> List[Dict[str, Any]]:
    """Entries for a purchase order, newest first, with display labels."""
    entries = PurchaseOrderCommunication.objects.filter(
        purchase_order_id=po_id
    ).select_related("created_by")
    return [
        {
            "id": e.pk,
            "type": e.communication_type,
            "type_display": e.get_communication_type_display(),
            "icon": ICONS.get(e.communication_type, "info"),
            "status": e.status,
            "status_display": e.get_status_display(),
            "subject": e.subject,
            "recipient_email": e.recipient_email,
            "metadata": e.metadata,
            "created_by": e.created_by.get_username() if e.created_by else None,
            "created_at": e.created_at,
        }
        for e in entries
    ]
