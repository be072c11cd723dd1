"""
BOS Policy Framework — Host Wiring
=====================================
Builds the application's PolicyRegistry from every module's policies.

- Plain policies are registered as instances.
- Parameterised policies are registered as factories fed from
  PolicyFrameworkSettings.
- Names in settings.disabled_policies stay registered but report
  enabled=False, so every run skips them.

The registry is locked before it is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from core.policy.contracts import Policy
from core.policy.registry import PolicyRegistry
from core.policy.settings import PolicyFrameworkSettings
from core.time import Clock
from engines.accounting.context import AccountAssignmentContext
from engines.accounting.policies import (
    ActiveAccountPolicy,
    CostCenterMandatoryPolicy,
    CreditLimitPolicy,
    DualControlManualEntryPolicy,
)
from engines.inventory.context import InventoryAdjustmentContext
from engines.inventory.policies import (
    AdjustmentReasonMandatoryPolicy,
    MaxStockLevelPolicy,
    NegativeStockPolicy,
    ReorderPointAlertPolicy,
)
from engines.posting.context import PostingContext
from engines.posting.policies import (
    BalancedEntryPolicy,
    FutureDatePostingPolicy,
    IntercompanyPartnerValidationPolicy,
    OpenFiscalPeriodPolicy,
)
from engines.sales.context import SalesInvoiceContext, SalesReturnContext
from engines.sales.policies import (
    CustomerBlacklistPolicy,
    CustomerBoughtProductPolicy,
    CustomerCreditLimitPolicy,
    NegativeStockOnInvoicePolicy,
    ProductReturnablePolicy,
    ReturnPeriodPolicy,
    StockAvailabilityPolicy,
)

logger = logging.getLogger("bos.policy.wiring")


class DisabledPolicy:
    """Wraps a policy switched off by configuration. Never selected."""

    def __init__(self, inner: Policy):
        self._inner = inner
        self.policy_name = inner.policy_name
        self.order = inner.order

    @property
    def enabled(self) -> bool:
        return False

    @property
    def inner(self) -> Policy:
        return self._inner

    def evaluate(self, context: Any):
        return self._inner.evaluate(context)

    def __repr__(self) -> str:
        return f"DisabledPolicy({self._inner!r})"


def build_policy_registry(
    settings: Optional[PolicyFrameworkSettings] = None,
    clock: Optional[Clock] = None,
) -> PolicyRegistry:
    """
    Register every module policy and lock.

    settings defaults to PolicyFrameworkSettings.from_django_settings().
    """
    if settings is None:
        settings = PolicyFrameworkSettings.from_django_settings()

    registry = PolicyRegistry(clock=clock)
    disabled = settings.disabled_policies

    def gate(policy: Policy) -> Policy:
        if policy.policy_name in disabled:
            logger.info(f"Policy '{policy.policy_name}' disabled by settings.")
            return DisabledPolicy(policy)
        return policy

    def add(context_type: type, policy: Policy) -> None:
        registry.register(context_type, gate(policy))

    # ── Inventory ─────────────────────────────────────────────
    registry.register_factory(
        InventoryAdjustmentContext,
        lambda: gate(AdjustmentReasonMandatoryPolicy(
            threshold=settings.adjustment_reason_mandatory_threshold,
        )),
    )
    add(InventoryAdjustmentContext, NegativeStockPolicy())
    add(InventoryAdjustmentContext, MaxStockLevelPolicy())
    add(InventoryAdjustmentContext, ReorderPointAlertPolicy())

    # ── Accounting ────────────────────────────────────────────
    add(AccountAssignmentContext, ActiveAccountPolicy())
    add(AccountAssignmentContext, CostCenterMandatoryPolicy())
    registry.register_factory(
        AccountAssignmentContext,
        lambda: gate(CreditLimitPolicy(
            warning_threshold=settings.credit_limit_warning_threshold,
        )),
    )
    add(AccountAssignmentContext, DualControlManualEntryPolicy())

    # ── Posting ───────────────────────────────────────────────
    add(PostingContext, BalancedEntryPolicy())
    add(PostingContext, OpenFiscalPeriodPolicy())
    registry.register_factory(
        PostingContext,
        lambda: gate(FutureDatePostingPolicy(
            max_future_days=settings.future_date_posting_max_days,
            clock=clock,
        )),
    )
    add(PostingContext, IntercompanyPartnerValidationPolicy())

    # ── Sales ─────────────────────────────────────────────────
    add(SalesInvoiceContext, CustomerBlacklistPolicy())
    add(SalesInvoiceContext, CustomerCreditLimitPolicy())
    add(SalesInvoiceContext, StockAvailabilityPolicy())
    add(SalesInvoiceContext, NegativeStockOnInvoicePolicy())

    add(SalesReturnContext, ReturnPeriodPolicy())
    add(SalesReturnContext, CustomerBoughtProductPolicy())
    add(SalesReturnContext, ProductReturnablePolicy())

    registry.lock()
    return registry
