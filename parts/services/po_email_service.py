"""Sending purchase orders to suppliers by email."""

import logging
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.mail import EmailMultiAlternatives
from django.core.validators import validate_email
from django.utils.html import escape, linebreaks

from parts.models import CommunicationStatus, CommunicationType
from . import po_timeline_service, purchase_order_service

logger = logging.getLogger(__name__)


def default_email_subject(po: dict) -> str:
    return f"Purchase Order {po['po_number']} - {settings.COMPANY_INFO.get('name', '')}".strip(" -")


def default_email_message(po: dict) -> str:
    company = settings.COMPANY_INFO.get("name", "")
    return (
        f"Hello {po.get('supplier_name') or ''},\n\n"
        f"Please find attached purchase order {po['po_number']}.\n"
        "Kindly confirm receipt and the expected delivery date.\n\n"
        f"Regards,\n{company}"
    )


def _clean_addresses(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.replace(";", ",").split(",")
    return [a.strip() for a in value if a and a.strip()]


def _invalid(addresses: Iterable[str]) -> List[str]:
    bad = []
    for address in addresses:
        try:
            validate_email(address)
        except ValidationError:
            bad.append(address)
    return bad


def _html_body(po: dict, message: str) -> str:
    company = settings.COMPANY_INFO
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px;">'
        f'<h2 style="color: #1e40af;">Purchase Order {escape(po["po_number"])}</h2>'
        f"{linebreaks(message)}"
        '<hr style="border: none; border-top: 1px solid #e5e7eb;">'
        f'<p style="color: #64748b; font-size: 12px;">{escape(company.get("name", ""))}'
        f'<br>{escape(company.get("phone", ""))} {escape(company.get("email", ""))}</p>'
        "</div>"
    )


def send_purchase_order_email(
    po_id: int,
    to,
    cc=None,
    subject: Optional[str] = None,
    message: Optional[str] = None,
    actor=None,
) -> Tuple[bool, str]:
    """Email the PO PDF to the supplier and record it on the PO timeline."""

    recipients = _clean_addresses(to)
    cc_list = _clean_addresses(cc)
    if not recipients:
        return False, "Missing email recipient."
    bad = _invalid(recipients + cc_list)
    if bad:
        return False, f"Invalid email address: {', '.join(bad)}"
    po = purchase_order_service.get_po_by_id(po_id)
    if po is None:
        return False, "Purchase Order not found."
    subject = (subject or "").strip() or default_email_subject(po)
    message = (message or "").strip() or default_email_message(po)

    try:
        pdf_bytes, _ = purchase_order_service.render_po_pdf(po_id)
    except ValueError as exc:
        return False, str(exc)

    email = EmailMultiAlternatives(
        subject=subject,
        body=message,
        from_email=settings.PO_EMAIL_FROM,
        to=recipients,
        cc=cc_list,
    )
    email.attach_alternative(_html_body(po, message), "text/html")
    email.attach(f"PO-{po['po_number']}.pdf", pdf_bytes, "application/pdf")
    metadata = {"cc": cc_list, "message": message}
    try:
        email.send()
    except Exception as exc:
        logger.exception("Failed to send PO %s to %s", po["po_number"], recipients)
        metadata["error"] = str(exc)
        po_timeline_service.log_communication(
            po_id,
            CommunicationType.EMAIL_BOUNCED,
            status=CommunicationStatus.FAILED,
            subject=subject,
            recipient_email=", ".join(recipients),
            metadata=metadata,
            actor=actor,
        )
        return False, "Failed to send email."

    po_timeline_service.log_communication(
        po_id,
        CommunicationType.EMAIL_SENT,
        status=CommunicationStatus.SENT,
        subject=subject,
        recipient_email=", ".join(recipients),
        metadata=metadata,
        actor=actor,
    )
    logger.info("Sent PO %s to %s", po["po_number"], recipients)
    return True, "Email sent successfully"
