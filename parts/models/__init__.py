from .catalog import Part, PartCategory, StockStatus
from .orders import (
    CommunicationStatus,
    CommunicationType,
    PurchaseOrder,
    PurchaseOrderCommunication,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from .replenishment import ReorderSuggestion, SuggestionStatus
from .suppliers import Supplier
from .usage import PartUsage

__all__ = [
    "Part",
    "PartCategory",
    "StockStatus",
    "PartUsage",
    "Supplier",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "PurchaseOrderStatus",
    "PurchaseOrderCommunication",
    "CommunicationType",
    "CommunicationStatus",
    "ReorderSuggestion",
    "SuggestionStatus",
]
