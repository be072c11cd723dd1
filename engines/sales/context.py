"""
BOS Sales Engine — Policy Contexts
====================================
SalesInvoiceContext: a sales invoice about to be issued.
SalesReturnContext:  a customer return against an earlier sale.

Customer, stock and sale-history lookups are async providers supplied
by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Tuple

BalanceProvider = Callable[[], Awaitable[Optional[Decimal]]]


# ══════════════════════════════════════════════════════════════
# SALES INVOICE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SalesInvoiceLine:
    item_code: str
    warehouse_code: str
    unit_of_measure: str
    quantity: Decimal


@dataclass(frozen=True)
class SalesInvoiceContext:
    """
    Fields:
        customer_code:           Customer being invoiced.
        is_credit:               Sale on account (True) or paid at sale.
        document_total:          Invoice total in currency.
        currency:                ISO currency code.
        line_items:              Invoice lines.
        document_date:           Invoice date.
        created_by:              User issuing the invoice.
        is_customer_blacklisted: Provider, True if sales are barred.
        get_stock_for_item:      Provider (item_code, warehouse_code) → stock.
        credit_limit:            Optional provider; None result = no data.
        current_balance:         Optional provider; None result = no data.
    """

    customer_code: str
    is_credit: bool
    document_total: Decimal
    currency: str
    line_items: Tuple[SalesInvoiceLine, ...]
    document_date: datetime
    created_by: str
    is_customer_blacklisted: Callable[[], Awaitable[bool]]
    get_stock_for_item: Callable[[str, str], Awaitable[Decimal]]
    credit_limit: Optional[BalanceProvider] = None
    current_balance: Optional[BalanceProvider] = None

    def __post_init__(self):
        object.__setattr__(self, "line_items", tuple(self.line_items))


# ══════════════════════════════════════════════════════════════
# SALES RETURN
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SalesReturnLine:
    item_code: str
    quantity: Decimal


@dataclass(frozen=True)
class SalesReturnContext:
    """
    Fields:
        customer_code:               Customer returning goods.
        original_sale_document_id:   Invoice the goods were sold on.
        original_sale_date:          Date of that sale.
        return_date:                 Date of the return.
        line_items:                  Returned lines.
        created_by:                  User recording the return.
        max_return_period_days:      Return window in days.
        customer_bought_item_on_sale: Provider (document_id, item_code) → bool.
        is_product_returnable:       Provider (item_code) → bool.
    """

    customer_code: str
    original_sale_document_id: str
    original_sale_date: datetime
    return_date: datetime
    line_items: Tuple[SalesReturnLine, ...]
    created_by: str
    max_return_period_days: int
    customer_bought_item_on_sale: Callable[[str, str], Awaitable[bool]]
    is_product_returnable: Callable[[str], Awaitable[bool]]

    def __post_init__(self):
        object.__setattr__(self, "line_items", tuple(self.line_items))
