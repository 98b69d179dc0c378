"""Equipment operation handlers."""

from gangroster.core.handlers.equipment.purchase import (
    EquipmentPurchaseResult,
    handle_equipment_purchase,
)
from gangroster.core.handlers.equipment.sale import (
    EquipmentSaleResult,
    EquipmentStashResult,
    handle_equipment_sale,
    handle_equipment_stash,
)

__all__ = [
    "EquipmentPurchaseResult",
    "EquipmentSaleResult",
    "EquipmentStashResult",
    "handle_equipment_purchase",
    "handle_equipment_sale",
    "handle_equipment_stash",
]
