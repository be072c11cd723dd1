"""
BOS Inventory Engine — Policy Context
=======================================
Data carried into inventory policies for one stock adjustment.
Pure data. Stock figures are read through async providers so
policies only pay for the lookups they need.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable

QuantityProvider = Callable[[], Awaitable[Decimal]]


@dataclass(frozen=True)
class InventoryAdjustmentContext:
    """
    Fields:
        warehouse_code:       Warehouse location (e.g. "WH-EAST").
        item_code:            Item/SKU being adjusted.
        unit_of_measure:      "EA", "KG", "L", ...
        adjustment_quantity:  Negative reduces stock, positive increases it.
        current_stock:        On-hand quantity before the adjustment.
        reorder_point:        Replenishment threshold; 0 means not configured.
        max_stock_level:      Maximum on-hand quantity; 0 means not configured.
        adjustment_reason:    Reason code (CYCLE_COUNT, WRITE_OFF, SHRINKAGE).
        requested_by:         User or system requesting the adjustment.
        transaction_date:     Business date of the transaction.
    """

    warehouse_code: str
    item_code: str
    unit_of_measure: str
    adjustment_quantity: Decimal
    current_stock: QuantityProvider
    reorder_point: QuantityProvider
    max_stock_level: QuantityProvider
    adjustment_reason: str
    requested_by: str
    transaction_date: datetime

    @property
    def is_negative_adjustment(self) -> bool:
        return self.adjustment_quantity < 0
