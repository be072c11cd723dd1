"""
BOS Accounting Engine — Policy Context
========================================
Data carried into accounting policies when an amount is assigned to a
general-ledger account.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Optional

BalanceProvider = Callable[[], Awaitable[Optional[Decimal]]]


class AccountType(Enum):
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"
    INTERCOMPANY = "Intercompany"


class AccountStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    BLOCKED = "Blocked"


@dataclass(frozen=True)
class AccountAssignmentContext:
    """
    Fields:
        account_code:          GL account code (e.g. "4000-REV").
        account_description:   Display name of the account.
        account_type:          Chart-of-accounts classification.
        account_status:        Lifecycle status of the account.
        company_code:          Legal entity posting the amount.
        cost_center:           Assigned cost center; may be empty.
        amount:                Amount being posted, in currency.
        currency:              ISO currency code.
        document_type:         Source document type (e.g. "JE", "AP-INV").
        assigned_by:           User performing the assignment.
        requires_cost_center:  Account demands a cost center.
        is_manual_entry:       Entered by hand rather than by a subledger.
        credit_limit:          Optional provider; None result = no limit data.
        current_balance:       Optional provider; None result = no balance data.
    """

    account_code: str
    account_description: str
    account_type: AccountType
    account_status: AccountStatus
    company_code: str
    cost_center: str
    amount: Decimal
    currency: str
    document_type: str
    assigned_by: str
    requires_cost_center: bool = False
    is_manual_entry: bool = False
    credit_limit: Optional[BalanceProvider] = None
    current_balance: Optional[BalanceProvider] = None
