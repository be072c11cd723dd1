"""
BOS Inventory Engine — Policies
=================================
Validation policies for inventory stock adjustments.

Order   Policy                              Severity
  5     Inventory.AdjustmentReasonMandatory ERROR
 10     Inventory.NegativeStock             ERROR
 20     Inventory.MaxStockLevel             WARNING
 30     Inventory.ReorderPointAlert         WARNING
"""

from __future__ import annotations

from decimal import Decimal

from core.policy import BasePolicy, PolicyOrdering, PolicyResult
from engines.inventory.context import InventoryAdjustmentContext


class InventoryErrorCodes:
    NEGATIVE_STOCK = "INV-001"
    REASON_CODE_MANDATORY = "INV-002"
    MAX_STOCK_LEVEL_EXCEEDED = "INV-W001"
    REORDER_POINT_REACHED = "INV-W002"


class AdjustmentReasonMandatoryPolicy(BasePolicy):
    """
    Large negative adjustments (at or below threshold) must carry a
    reason code for audit-trail compliance. I/O-free hard gate.
    """

    policy_name = "Inventory.AdjustmentReasonMandatory"
    order = PolicyOrdering.HARD_GATE_MIN + 4

    def __init__(self, threshold: Decimal = Decimal("-100")):
        self._threshold = Decimal(threshold)

    def evaluate(self, context: InventoryAdjustmentContext) -> PolicyResult:
        if (
            context.adjustment_quantity <= self._threshold
            and not (context.adjustment_reason or "").strip()
        ):
            uom = context.unit_of_measure
            return self.fail(
                code=InventoryErrorCodes.REASON_CODE_MANDATORY,
                message=(
                    f"A reason code is required for adjustments of "
                    f"{self._threshold:,.2f} {uom} or less. "
                    f"Requested adjustment: "
                    f"{context.adjustment_quantity:,.2f} {uom}."
                ),
                field="adjustment_reason",
                metadata={
                    "threshold": self._threshold,
                    "adjustment_quantity": context.adjustment_quantity,
                },
            )
        return self.pass_policy()


class NegativeStockPolicy(BasePolicy):
    """On-hand stock may never fall below zero (no backorder modelling)."""

    policy_name = "Inventory.NegativeStock"
    order = PolicyOrdering.BUSINESS_RULE_MIN

    async def evaluate(self, context: InventoryAdjustmentContext) -> PolicyResult:
        current_stock = await context.current_stock()
        resulting_stock = current_stock + context.adjustment_quantity

        if resulting_stock < 0:
            return self.fail(
                code=InventoryErrorCodes.NEGATIVE_STOCK,
                message=(
                    f"Adjustment would result in negative stock "
                    f"({resulting_stock:,.2f} {context.unit_of_measure}) "
                    f"for item '{context.item_code}' in warehouse "
                    f"'{context.warehouse_code}'. "
                    f"Current stock: {current_stock:,.2f}, "
                    f"Adjustment: {context.adjustment_quantity:,.2f}."
                ),
                field="adjustment_quantity",
                metadata={
                    "current_stock": current_stock,
                    "adjustment_quantity": context.adjustment_quantity,
                    "resulting_stock": resulting_stock,
                    "item_code": context.item_code,
                    "warehouse_code": context.warehouse_code,
                },
            )
        return self.pass_policy()


class MaxStockLevelPolicy(BasePolicy):
    """
    Warn when an inbound adjustment pushes stock above the configured
    maximum. Advisory: the planner decides whether to proceed.
    """

    policy_name = "Inventory.MaxStockLevel"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 10

    async def evaluate(self, context: InventoryAdjustmentContext) -> PolicyResult:
        max_stock_level = await context.max_stock_level()
        if max_stock_level <= 0:
            return self.pass_policy()

        current_stock = await context.current_stock()
        resulting_stock = current_stock + context.adjustment_quantity

        if resulting_stock > max_stock_level:
            uom = context.unit_of_measure
            return self.warn(
                code=InventoryErrorCodes.MAX_STOCK_LEVEL_EXCEEDED,
                message=(
                    f"Resulting stock ({resulting_stock:,.2f} {uom}) exceeds "
                    f"the maximum stock level ({max_stock_level:,.2f} {uom}) "
                    f"for item '{context.item_code}' in warehouse "
                    f"'{context.warehouse_code}'. Consider cancelling or "
                    f"reducing the inbound quantity."
                ),
            )
        return self.pass_policy()


class ReorderPointAlertPolicy(BasePolicy):
    """
    Warn when an adjustment takes stock from above the reorder point to
    at or below it. Stock that is already at or below the reorder point
    does not re-trigger the alert.
    """

    policy_name = "Inventory.ReorderPointAlert"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 20

    async def evaluate(self, context: InventoryAdjustmentContext) -> PolicyResult:
        reorder_point = await context.reorder_point()
        if reorder_point <= 0:
            return self.pass_policy()

        current_stock = await context.current_stock()
        resulting_stock = current_stock + context.adjustment_quantity

        crosses_threshold = (
            current_stock > reorder_point and resulting_stock <= reorder_point
        )
        if crosses_threshold:
            uom = context.unit_of_measure
            return self.warn(
                code=InventoryErrorCodes.REORDER_POINT_REACHED,
                message=(
                    f"Stock for item '{context.item_code}' in warehouse "
                    f"'{context.warehouse_code}' will reach "
                    f"{resulting_stock:,.2f} {uom}, at or below the reorder "
                    f"point of {reorder_point:,.2f} {uom}. "
                    f"Consider raising a purchase order."
                ),
            )
        return self.pass_policy()


__all__ = [
    "InventoryErrorCodes",
    "AdjustmentReasonMandatoryPolicy",
    "NegativeStockPolicy",
    "MaxStockLevelPolicy",
    "ReorderPointAlertPolicy",
]
