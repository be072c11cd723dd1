"""
BOS Sales Engine — Policies
=============================
Validation policies for sales invoices and sales returns.
"""

from engines.sales.policies.codes import SalesErrorCodes
from engines.sales.policies.invoice import (
    CustomerBlacklistPolicy,
    CustomerCreditLimitPolicy,
    NegativeStockOnInvoicePolicy,
    StockAvailabilityPolicy,
)
from engines.sales.policies.returns import (
    CustomerBoughtProductPolicy,
    ProductReturnablePolicy,
    ReturnPeriodPolicy,
)

__all__ = [
    "SalesErrorCodes",
    # ── Invoice ───────────────────────────────────────────────
    "CustomerBlacklistPolicy",
    "CustomerCreditLimitPolicy",
    "StockAvailabilityPolicy",
    "NegativeStockOnInvoicePolicy",
    # ── Return ────────────────────────────────────────────────
    "ReturnPeriodPolicy",
    "CustomerBoughtProductPolicy",
    "ProductReturnablePolicy",
]
