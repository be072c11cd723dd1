"""
BOS Accounting Engine — Policy Tests
======================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import pytest

from core.policy import PolicyExecutor, Severity
from engines.accounting.context import (
    AccountAssignmentContext,
    AccountStatus,
    AccountType,
)
from engines.accounting.policies import (
    AccountingErrorCodes,
    ActiveAccountPolicy,
    CostCenterMandatoryPolicy,
    CreditLimitPolicy,
    DualControlManualEntryPolicy,
)


def provides(value: Optional[str]):
    async def provider():
        return None if value is None else Decimal(value)
    return provider


def make_context(**overrides) -> AccountAssignmentContext:
    fields = dict(
        account_code="4000-REV",
        account_description="Product revenue",
        account_type=AccountType.EXPENSE,
        account_status=AccountStatus.ACTIVE,
        company_code="C100",
        cost_center="CC-OPS",
        amount=Decimal("1000"),
        currency="EUR",
        document_type="JE",
        assigned_by="gl.accountant",
    )
    fields.update(overrides)
    return AccountAssignmentContext(**fields)


# ══════════════════════════════════════════════════════════════
# ACTIVE ACCOUNT
# ══════════════════════════════════════════════════════════════

class TestActiveAccountPolicy:
    def test_active_passes(self):
        assert ActiveAccountPolicy().evaluate(make_context()).succeeded

    def test_blocked_fails(self):
        result = ActiveAccountPolicy().evaluate(
            make_context(account_status=AccountStatus.BLOCKED)
        )
        [v] = result.violations
        assert v.code == AccountingErrorCodes.ACCOUNT_BLOCKED
        assert v.severity == Severity.ERROR
        assert v.field == "account_code"
        assert "BLOCKED" in v.message

    def test_inactive_fails(self):
        result = ActiveAccountPolicy().evaluate(
            make_context(account_status=AccountStatus.INACTIVE)
        )
        assert result.violations[0].code == AccountingErrorCodes.ACCOUNT_INACTIVE

    def test_unknown_status_is_critical(self):
        result = ActiveAccountPolicy().evaluate(
            make_context(account_status="Archived")
        )
        [v] = result.violations
        assert v.code == AccountingErrorCodes.UNKNOWN_STATUS
        assert v.severity == Severity.CRITICAL
        assert v.field == "account_status"


# ══════════════════════════════════════════════════════════════
# COST CENTER
# ══════════════════════════════════════════════════════════════

class TestCostCenterMandatoryPolicy:
    def test_not_required_passes(self):
        result = CostCenterMandatoryPolicy().evaluate(make_context(cost_center=""))
        assert result.succeeded

    def test_required_and_blank_fails(self):
        result = CostCenterMandatoryPolicy().evaluate(
            make_context(requires_cost_center=True, cost_center="   ")
        )
        [v] = result.violations
        assert v.code == AccountingErrorCodes.COST_CENTER_MISSING
        assert v.field == "cost_center"

    def test_required_and_present_passes(self):
        result = CostCenterMandatoryPolicy().evaluate(
            make_context(requires_cost_center=True, cost_center="CC-OPS")
        )
        assert result.succeeded


# ══════════════════════════════════════════════════════════════
# CREDIT LIMIT
# ══════════════════════════════════════════════════════════════

class TestCreditLimitPolicy:
    @pytest.mark.asyncio
    async def test_breach_fails_with_metadata(self):
        ctx = make_context(
            amount=Decimal("600"),
            credit_limit=provides("1000"),
            current_balance=provides("500"),
        )
        result = await CreditLimitPolicy().evaluate(ctx)

        [v] = result.violations
        assert v.code == AccountingErrorCodes.CREDIT_LIMIT_BREACHED
        assert v.metadata["projected_balance"] == Decimal("1100")
        assert v.metadata["overage"] == Decimal("100")
        assert v.metadata["currency"] == "EUR"
        assert "1,100.00 EUR" in v.message

    @pytest.mark.asyncio
    async def test_high_utilisation_warns(self):
        ctx = make_context(
            amount=Decimal("400"),
            credit_limit=provides("1000"),
            current_balance=provides("500"),
        )
        result = await CreditLimitPolicy().evaluate(ctx)

        [v] = result.violations
        assert result.succeeded
        assert v.code == AccountingErrorCodes.CREDIT_LIMIT_WARNING
        assert v.severity == Severity.WARNING
        assert "90.0%" in v.message

    @pytest.mark.asyncio
    async def test_threshold_is_configurable(self):
        ctx = make_context(
            amount=Decimal("350"),
            credit_limit=provides("1000"),
            current_balance=provides("500"),
        )
        assert not (await CreditLimitPolicy().evaluate(ctx)).has_violations
        warned = await CreditLimitPolicy(warning_threshold=Decimal("0.85")).evaluate(ctx)
        assert warned.violations[0].code == AccountingErrorCodes.CREDIT_LIMIT_WARNING

    @pytest.mark.asyncio
    async def test_missing_providers_skip(self):
        result = await CreditLimitPolicy().evaluate(
            make_context(amount=Decimal("1000000"))
        )
        assert not result.has_violations

    @pytest.mark.asyncio
    async def test_provider_without_data_skips(self):
        ctx = make_context(
            amount=Decimal("1000000"),
            credit_limit=provides(None),
            current_balance=provides("0"),
        )
        assert not (await CreditLimitPolicy().evaluate(ctx)).has_violations


# ══════════════════════════════════════════════════════════════
# DUAL CONTROL
# ══════════════════════════════════════════════════════════════

class TestDualControlManualEntryPolicy:
    @pytest.mark.parametrize("account_type", [
        AccountType.REVENUE, AccountType.LIABILITY, AccountType.EQUITY,
    ])
    def test_manual_entry_to_sensitive_account_warns(self, account_type):
        result = DualControlManualEntryPolicy().evaluate(
            make_context(account_type=account_type, is_manual_entry=True)
        )
        [v] = result.violations
        assert result.succeeded
        assert v.code == AccountingErrorCodes.DUAL_CONTROL_REQUIRED
        assert v.severity == Severity.WARNING

    def test_manual_entry_to_expense_passes(self):
        result = DualControlManualEntryPolicy().evaluate(
            make_context(account_type=AccountType.EXPENSE, is_manual_entry=True)
        )
        assert not result.has_violations

    def test_system_entry_passes(self):
        result = DualControlManualEntryPolicy().evaluate(
            make_context(account_type=AccountType.REVENUE, is_manual_entry=False)
        )
        assert not result.has_violations


# ══════════════════════════════════════════════════════════════
# PIPELINE
# ══════════════════════════════════════════════════════════════

class TestAccountingPipeline:
    @pytest.mark.asyncio
    async def test_blocked_manual_revenue_entry(self):
        executor = PolicyExecutor(
            [
                DualControlManualEntryPolicy(),
                CreditLimitPolicy(),
                CostCenterMandatoryPolicy(),
                ActiveAccountPolicy(),
            ],
            context_type=AccountAssignmentContext,
        )
        ctx = make_context(
            account_type=AccountType.REVENUE,
            account_status=AccountStatus.BLOCKED,
            requires_cost_center=True,
            cost_center="",
            is_manual_entry=True,
        )

        result = await executor.execute(ctx)

        assert [r.policy_name for r in result.results] == [
            "Accounting.ActiveAccount",
            "Accounting.CostCenterMandatory",
            "Accounting.CreditLimit",
            "Accounting.DualControlManualEntry",
        ]
        assert [v.code for v in result.blocking_violations] == ["ACC-001", "ACC-003"]
        assert [v.code for v in result.advisory_violations] == ["ACC-W001"]
