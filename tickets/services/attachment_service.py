"""Files attached to tickets.

Allowed content types are prefixes (``image/`` matches any image) taken from
``ATTACHMENT_ALLOWED_TYPES``; uploads above ``ATTACHMENT_MAX_BYTES`` are
refused. Each upload adds a ``file_attached`` entry to the ticket feed.
"""

import logging
from typing import List, Optional, Tuple

from django.conf import settings
from django.db import DatabaseError, transaction

from tickets.models import Ticket, TicketAttachment
from . import activity_service

logger = logging.getLogger(__name__)


def _type_allowed(content_type: str) -> bool:
    content_type = (content_type or "").lower()
    return any(
        content_type == allowed or (allowed.endswith("/") and content_type.startswith(allowed))
        for allowed in settings.ATTACHMENT_ALLOWED_TYPES
    )


def upload_attachment(
    ticket_id: int, upload, actor=None
) -> Tuple[bool, str, Optional[int]]:
    """Store ``upload`` (a Django ``UploadedFile``) against a ticket."""

    if upload is None:
        return False, "Choose a file to upload.", None
    if not Ticket.objects.filter(pk=ticket_id).exists():
        return False, f"Ticket {ticket_id} not found.", None
    if not upload.size:
        return False, "The file is empty.", None
    if upload.size > settings.ATTACHMENT_MAX_BYTES:
        return False, (
            f"File is too large ({upload.size} bytes; "
            f"the limit is {settings.ATTACHMENT_MAX_BYTES} bytes)."
        ), None
    content_type = getattr(upload, "content_type", "") or ""
    if not _type_allowed(content_type):
        return False, f"Files of type '{content_type or 'unknown'}' are not allowed.", None

    created_by = actor if getattr(actor, "is_authenticated", False) else None
    attachment = None
    try:
        with transaction.atomic():
            attachment = TicketAttachment.objects.create(
                ticket_id=ticket_id,
                file=upload,
                file_name=upload.name,
                file_type=content_type,
                file_size=upload.size,
                created_by=created_by,
            )
            activity_service.log_file_attached(
                ticket_id, upload.name, content_type, created_by=actor
            )
    except DatabaseError as exc:
        logger.error("Could not attach %s to ticket %s: %s", upload.name, ticket_id, exc)
        if attachment is not None:
            attachment.file.delete(save=False)
        return False, "Database error saving the attachment.", None
    logger.info(
        "Attached %s (%s bytes) to ticket %s", upload.name, upload.size, ticket_id
    )
    return True, f"{upload.name} uploaded.", attachment.pk


def list_attachments(ticket_id: int) -> List[TicketAttachment]:
    return list(TicketAttachment.objects.filter(ticket_id=ticket_id))


def get_attachment(ticket_id: int, attachment_id: int) -> Optional[TicketAttachment]:
    return TicketAttachment.objects.filter(pk=attachment_id, ticket_id=ticket_id).first()


def delete_attachment(ticket_id: int, attachment_id: int) -> bool:
    """Remove the row and the stored file."""
    attachment = get_attachment(ticket_id, attachment_id)
    if attachment is None:
        return False
    attachment.file.delete(save=False)
    attachment.delete()
    logger.info("Deleted attachment %s from ticket %s", attachment_id, ticket_id)
    return True
