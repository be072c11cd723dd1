"""
BOS Sales Engine — Invoice Policies
=====================================
Order   Policy                              Severity
  2     Sales.Invoice.CustomerBlacklist     ERROR
 10     Sales.Invoice.CreditLimit           ERROR
 15     Sales.Invoice.StockAvailability     ERROR (per line)
 20     Sales.Invoice.NegativeStock         ERROR (per line)
"""

from __future__ import annotations

from typing import List

from core.policy import (
    BasePolicy,
    PolicyOrdering,
    PolicyResult,
    PolicyViolation,
    Severity,
)
from engines.sales.context import SalesInvoiceContext
from engines.sales.policies.codes import SalesErrorCodes


class CustomerBlacklistPolicy(BasePolicy):
    policy_name = "Sales.Invoice.CustomerBlacklist"
    order = PolicyOrdering.HARD_GATE_MIN + 1

    async def evaluate(self, context: SalesInvoiceContext) -> PolicyResult:
        if await context.is_customer_blacklisted():
            return self.fail(
                code=SalesErrorCodes.CUSTOMER_BLACKLISTED,
                message=(
                    f"Customer '{context.customer_code}' is on the "
                    f"blacklist. Sales are not allowed."
                ),
                field="customer_code",
                metadata={"customer_code": context.customer_code},
            )
        return self.pass_policy()


class CustomerCreditLimitPolicy(BasePolicy):
    """
    Credit sales may not push the customer's balance above the limit.
    Cash sales and customers without credit data are not checked.
    """

    policy_name = "Sales.Invoice.CreditLimit"
    order = PolicyOrdering.BUSINESS_RULE_MIN

    async def evaluate(self, context: SalesInvoiceContext) -> PolicyResult:
        if not context.is_credit:
            return self.pass_policy()
        if context.credit_limit is None or context.current_balance is None:
            return self.pass_policy()

        limit = await context.credit_limit()
        balance = await context.current_balance()
        if limit is None or balance is None:
            return self.pass_policy()

        projected = balance + context.document_total
        if projected <= limit:
            return self.pass_policy()

        return self.fail(
            code=SalesErrorCodes.CREDIT_LIMIT_EXCEEDED,
            message=(
                f"Credit sale would exceed customer "
                f"'{context.customer_code}' credit limit. "
                f"Projected balance: {projected:,.2f} {context.currency}, "
                f"Limit: {limit:,.2f} {context.currency}."
            ),
            field="document_total",
            metadata={
                "customer_code": context.customer_code,
                "document_total": context.document_total,
                "current_balance": balance,
                "credit_limit": limit,
                "projected_balance": projected,
            },
        )


class StockAvailabilityPolicy(BasePolicy):
    """One violation per line whose warehouse stock is below the quantity."""

    policy_name = "Sales.Invoice.StockAvailability"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 5

    async def evaluate(self, context: SalesInvoiceContext) -> PolicyResult:
        violations: List[PolicyViolation] = []

        for line in context.line_items:
            available = await context.get_stock_for_item(
                line.item_code, line.warehouse_code
            )
            if available < line.quantity:
                violations.append(PolicyViolation(
                    code=SalesErrorCodes.ITEM_NOT_AVAILABLE,
                    message=(
                        f"Item '{line.item_code}' has insufficient stock in "
                        f"warehouse '{line.warehouse_code}'. "
                        f"Required: {line.quantity:,.2f} "
                        f"{line.unit_of_measure}, "
                        f"Available: {available:,.2f}."
                    ),
                    severity=Severity.ERROR,
                    field="quantity",
                    metadata={
                        "item_code": line.item_code,
                        "warehouse_code": line.warehouse_code,
                        "required": line.quantity,
                        "available": available,
                    },
                ))

        if violations:
            return self.fail_many(violations)
        return self.pass_policy()


class NegativeStockOnInvoicePolicy(BasePolicy):
    """One violation per line whose sale would drive stock below zero."""

    policy_name = "Sales.Invoice.NegativeStock"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 10

    async def evaluate(self, context: SalesInvoiceContext) -> PolicyResult:
        violations: List[PolicyViolation] = []

        for line in context.line_items:
            current = await context.get_stock_for_item(
                line.item_code, line.warehouse_code
            )
            resulting = current - line.quantity
            if resulting < 0:
                violations.append(PolicyViolation(
                    code=SalesErrorCodes.NEGATIVE_STOCK,
                    message=(
                        f"Sale would result in negative stock for item "
                        f"'{line.item_code}' in warehouse "
                        f"'{line.warehouse_code}'. Current: {current:,.2f}, "
                        f"Sale qty: {line.quantity:,.2f}, "
                        f"Resulting: {resulting:,.2f} {line.unit_of_measure}."
                    ),
                    severity=Severity.ERROR,
                    field="quantity",
                    metadata={
                        "item_code": line.item_code,
                        "warehouse_code": line.warehouse_code,
                        "current_stock": current,
                        "quantity": line.quantity,
                        "resulting_stock": resulting,
                    },
                ))

        if violations:
            return self.fail_many(violations)
        return self.pass_policy()
