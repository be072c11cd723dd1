"""
BOS Accounting Engine — Policies
==================================
Validation policies for GL account assignment.

Order   Policy                              Severity
  1     Accounting.ActiveAccount            ERROR / CRITICAL
 10     Accounting.CostCenterMandatory      ERROR
 15     Accounting.CreditLimit              ERROR / WARNING
 20     Accounting.DualControlManualEntry   WARNING
"""

from __future__ import annotations

from decimal import Decimal

from core.policy import BasePolicy, PolicyOrdering, PolicyResult, Severity
from engines.accounting.context import (
    AccountAssignmentContext,
    AccountStatus,
    AccountType,
)


class AccountingErrorCodes:
    UNKNOWN_STATUS = "ACC-000"
    ACCOUNT_BLOCKED = "ACC-001"
    ACCOUNT_INACTIVE = "ACC-002"
    COST_CENTER_MISSING = "ACC-003"
    CREDIT_LIMIT_BREACHED = "ACC-004"
    DUAL_CONTROL_REQUIRED = "ACC-W001"
    CREDIT_LIMIT_WARNING = "ACC-W002"


class ActiveAccountPolicy(BasePolicy):
    """
    Postings are accepted only on ACTIVE accounts. Any status the policy
    does not recognise is treated as a systemic problem (CRITICAL).
    """

    policy_name = "Accounting.ActiveAccount"
    order = PolicyOrdering.HARD_GATE_MIN

    def evaluate(self, context: AccountAssignmentContext) -> PolicyResult:
        status = context.account_status
        label = f"'{context.account_code}' ({context.account_description})"

        if status is AccountStatus.ACTIVE:
            return self.pass_policy()

        if status is AccountStatus.BLOCKED:
            return self.fail(
                code=AccountingErrorCodes.ACCOUNT_BLOCKED,
                message=(
                    f"Account {label} is BLOCKED and cannot receive postings. "
                    f"Contact the chart-of-accounts administrator to unblock."
                ),
                field="account_code",
            )

        if status is AccountStatus.INACTIVE:
            return self.fail(
                code=AccountingErrorCodes.ACCOUNT_INACTIVE,
                message=(
                    f"Account {label} is INACTIVE. Reactivate the account "
                    f"before posting, or redirect to an active alternative "
                    f"account."
                ),
                field="account_code",
            )

        return self.fail(
            code=AccountingErrorCodes.UNKNOWN_STATUS,
            message=(
                f"Account '{context.account_code}' has an unknown status "
                f"'{status}'. Posting is blocked pending investigation."
            ),
            severity=Severity.CRITICAL,
            field="account_status",
        )


class CostCenterMandatoryPolicy(BasePolicy):
    """Accounts flagged requires_cost_center reject blank cost centers."""

    policy_name = "Accounting.CostCenterMandatory"
    order = PolicyOrdering.BUSINESS_RULE_MIN

    def evaluate(self, context: AccountAssignmentContext) -> PolicyResult:
        if not context.requires_cost_center:
            return self.pass_policy()

        if not (context.cost_center or "").strip():
            return self.fail(
                code=AccountingErrorCodes.COST_CENTER_MISSING,
                message=(
                    f"Account '{context.account_code}' "
                    f"({context.account_type.value}) is configured to require "
                    f"a cost center assignment. Specify a valid cost center "
                    f"before posting."
                ),
                field="cost_center",
            )
        return self.pass_policy()


class CreditLimitPolicy(BasePolicy):
    """
    Projected balance (current balance + amount) may not exceed the
    account's credit limit. Utilisation at or above warning_threshold
    produces an advisory warning.

    Skipped when either provider is missing or returns None.
    """

    policy_name = "Accounting.CreditLimit"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 5

    def __init__(self, warning_threshold: Decimal = Decimal("0.90")):
        self._warning_threshold = Decimal(warning_threshold)

    @property
    def warning_threshold(self) -> Decimal:
        return self._warning_threshold

    async def evaluate(self, context: AccountAssignmentContext) -> PolicyResult:
        if context.credit_limit is None or context.current_balance is None:
            return self.pass_policy()

        credit_limit = await context.credit_limit()
        current_balance = await context.current_balance()
        if credit_limit is None or current_balance is None:
            return self.pass_policy()

        projected = current_balance + context.amount
        currency = context.currency

        if projected > credit_limit:
            overage = projected - credit_limit
            return self.fail(
                code=AccountingErrorCodes.CREDIT_LIMIT_BREACHED,
                message=(
                    f"Posting to account '{context.account_code}' would "
                    f"breach the configured credit limit. "
                    f"Projected balance: {projected:,.2f} {currency}, "
                    f"Credit limit: {credit_limit:,.2f} {currency}, "
                    f"Overage: {overage:,.2f} {currency}."
                ),
                metadata={
                    "current_balance": current_balance,
                    "amount": context.amount,
                    "projected_balance": projected,
                    "credit_limit": credit_limit,
                    "overage": overage,
                    "currency": currency,
                },
            )

        utilisation = projected / credit_limit if credit_limit > 0 else Decimal("0")
        if utilisation >= self._warning_threshold:
            return self.warn(
                code=AccountingErrorCodes.CREDIT_LIMIT_WARNING,
                message=(
                    f"Account '{context.account_code}' will reach "
                    f"{utilisation:.1%} of its credit limit "
                    f"({projected:,.2f} / {credit_limit:,.2f} {currency}) "
                    f"after this posting. Review account balance."
                ),
            )
        return self.pass_policy()


class DualControlManualEntryPolicy(BasePolicy):
    """
    Manual entries to sensitive account types need four-eyes approval.
    Advisory only: the approval workflow lives outside this pipeline.
    """

    SENSITIVE_ACCOUNT_TYPES = frozenset({
        AccountType.REVENUE,
        AccountType.LIABILITY,
        AccountType.EQUITY,
    })

    policy_name = "Accounting.DualControlManualEntry"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 10

    def evaluate(self, context: AccountAssignmentContext) -> PolicyResult:
        if not context.is_manual_entry:
            return self.pass_policy()

        if context.account_type in self.SENSITIVE_ACCOUNT_TYPES:
            return self.warn(
                code=AccountingErrorCodes.DUAL_CONTROL_REQUIRED,
                message=(
                    f"Manual journal entry to {context.account_type.value} "
                    f"account '{context.account_code}' requires dual-control "
                    f"(four-eyes) approval per segregation-of-duties policy. "
                    f"A second approver must review and authorise this entry "
                    f"before it is committed to the ledger."
                ),
            )
        return self.pass_policy()


__all__ = [
    "AccountingErrorCodes",
    "ActiveAccountPolicy",
    "CostCenterMandatoryPolicy",
    "CreditLimitPolicy",
    "DualControlManualEntryPolicy",
]
