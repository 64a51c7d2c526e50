"""Errors raised by the parts-usage workflow.

Each error carries a machine-readable ``code`` and a message that can be
shown to the user as-is.
"""

from typing import Any, Optional


class PartsUsageError(Exception):
    """Base class for parts-usage failures."""

    code = "parts_usage_error"

    def __init__(self, message: str, **data: Any):
        super().__init__(message)
        self.message = message
        self.data = data


class InvalidInput(PartsUsageError):
    """Rejected request, raised before anything is read or written."""

    code = "invalid_input"


class PartNotFound(PartsUsageError):
    code = "part_not_found"

    def __init__(self, part_id: Any):
        super().__init__(f"Part {part_id} not found.", part_id=part_id)
        self.part_id = part_id


class TicketNotFound(PartsUsageError):
    code = "ticket_not_found"

    def __init__(self, ticket_id: Any):
        super().__init__(f"Ticket {ticket_id} not found.", ticket_id=ticket_id)
        self.ticket_id = ticket_id


class PersistFailed(PartsUsageError):
    """The store refused to write the usage record.

    ``reason`` is :attr:`INSUFFICIENT_STOCK` when stock dropped below the
    requested quantity after it was checked; callers may re-evaluate in that
    case. Any other refusal uses :attr:`REJECTED`.
    """

    code = "persist_failed"
    INSUFFICIENT_STOCK = "insufficient_stock"
    REJECTED = "rejected"

    def __init__(
        self,
        reason: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
        **data: Any,
    ):
        if message is None:
            if reason == self.INSUFFICIENT_STOCK:
                message = (
                    "Stock changed since it was checked; not enough units are "
                    "left to record this usage."
                )
            else:
                message = "The usage record could not be saved."
        super().__init__(message, reason=reason, **data)
        self.reason = reason
        self.cause = cause

    @property
    def stock_changed(self) -> bool:
        return self.reason == self.INSUFFICIENT_STOCK


class ActivityLogFailed(PartsUsageError):
    """Writing the activity entry failed; never propagated to callers."""

    code = "activity_log_failed"


__all__ = [
    "PartsUsageError",
    "InvalidInput",
    "PartNotFound",
    "TicketNotFound",
    "PersistFailed",
    "ActivityLogFailed",
]
