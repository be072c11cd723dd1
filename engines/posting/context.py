"""
BOS Posting Engine — Policy Context
=====================================
Data carried into posting policies for one document about to be
committed to the general ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Optional


class PostingDocumentType(Enum):
    SALES_INVOICE = "SalesInvoice"
    PURCHASE_INVOICE = "PurchaseInvoice"
    JOURNAL_ENTRY = "JournalEntry"
    PAYMENT_RECEIPT = "PaymentReceipt"
    CREDIT_NOTE = "CreditNote"
    DEBIT_NOTE = "DebitNote"


class FiscalPeriodStatus(Enum):
    OPEN = "Open"
    CLOSING = "Closing"
    CLOSED = "Closed"
    LOCKED = "Locked"


PeriodStatusProvider = Callable[[], Awaitable[FiscalPeriodStatus]]


@dataclass(frozen=True)
class PostingContext:
    """
    Fields:
        document_number:            Document identifier (e.g. "JE-2026-000123").
        document_type:              Kind of source document.
        company_code:               Posting legal entity.
        ledger_code:                Target ledger (e.g. "0L" leading ledger).
        document_date:              Date printed on the document.
        posting_date:               Date the entry hits the ledger.
        fiscal_year:                Fiscal year of the posting period.
        fiscal_period:              Fiscal period number within the year.
        period_status:              Provider for the period's status.
        total_debit:                Sum of debit lines.
        total_credit:               Sum of credit lines.
        currency:                   ISO currency code.
        posted_by:                  User posting the document.
        is_intercompany:            Document crosses legal entities.
        intercompany_partner_code:  Partner company; required if intercompany.
    """

    document_number: str
    document_type: PostingDocumentType
    company_code: str
    ledger_code: str
    document_date: datetime
    posting_date: datetime
    fiscal_year: int
    fiscal_period: int
    period_status: PeriodStatusProvider
    total_debit: Decimal
    total_credit: Decimal
    currency: str
    posted_by: str
    is_intercompany: bool = False
    intercompany_partner_code: Optional[str] = None

    @property
    def imbalance(self) -> Decimal:
        return abs(self.total_debit - self.total_credit)
