"""
BOS Sales Engine — Return Policies
====================================
Order   Policy                              Severity
  3     Sales.Return.ReturnPeriod           ERROR
 10     Sales.Return.CustomerBoughtProduct  ERROR (per line)
 15     Sales.Return.ProductReturnable      ERROR (per line)
"""

from __future__ import annotations

from typing import List

from core.policy import (
    BasePolicy,
    PolicyOrdering,
    PolicyResult,
    PolicyViolation,
)
from engines.sales.context import SalesReturnContext
from engines.sales.policies.codes import SalesErrorCodes

_SECONDS_PER_DAY = 86400


class ReturnPeriodPolicy(BasePolicy):
    """
    Return must fall within max_return_period_days of the original sale.
    Elapsed time is measured in fractional days.
    """

    policy_name = "Sales.Return.ReturnPeriod"
    order = PolicyOrdering.HARD_GATE_MIN + 2

    def evaluate(self, context: SalesReturnContext) -> PolicyResult:
        elapsed = context.return_date - context.original_sale_date
        days_since_sale = elapsed.total_seconds() / _SECONDS_PER_DAY

        if days_since_sale > context.max_return_period_days:
            return self.fail(
                code=SalesErrorCodes.RETURN_PERIOD_EXCEEDED,
                message=(
                    f"Return period exceeded. Original sale: "
                    f"{context.original_sale_date:%Y-%m-%d}, "
                    f"Return date: {context.return_date:%Y-%m-%d}. "
                    f"Maximum allowed: {context.max_return_period_days} days."
                ),
                field="return_date",
                metadata={
                    "original_sale_date": context.original_sale_date,
                    "return_date": context.return_date,
                    "days_since_sale": days_since_sale,
                    "max_return_period_days": context.max_return_period_days,
                },
            )
        return self.pass_policy()


class CustomerBoughtProductPolicy(BasePolicy):
    """Every returned item must appear on the original sale."""

    policy_name = "Sales.Return.CustomerBoughtProduct"
    order = PolicyOrdering.BUSINESS_RULE_MIN

    async def evaluate(self, context: SalesReturnContext) -> PolicyResult:
        violations: List[PolicyViolation] = []

        for line in context.line_items:
            bought = await context.customer_bought_item_on_sale(
                context.original_sale_document_id, line.item_code
            )
            if not bought:
                violations.append(PolicyViolation(
                    code=SalesErrorCodes.CUSTOMER_DID_NOT_BUY,
                    message=(
                        f"Customer '{context.customer_code}' did not purchase "
                        f"item '{line.item_code}' on the original sale. "
                        f"Cannot return."
                    ),
                    field="item_code",
                    metadata={
                        "customer_code": context.customer_code,
                        "item_code": line.item_code,
                        "original_sale_document": context.original_sale_document_id,
                    },
                ))

        if violations:
            return self.fail_many(violations)
        return self.pass_policy()


class ProductReturnablePolicy(BasePolicy):
    policy_name = "Sales.Return.ProductReturnable"
    order = PolicyOrdering.BUSINESS_RULE_MIN + 5

    async def evaluate(self, context: SalesReturnContext) -> PolicyResult:
        violations: List[PolicyViolation] = []

        for line in context.line_items:
            if not await context.is_product_returnable(line.item_code):
                violations.append(PolicyViolation(
                    code=SalesErrorCodes.PRODUCT_NOT_RETURNABLE,
                    message=(
                        f"Product '{line.item_code}' is not eligible for "
                        f"return (final sale, consumable, or policy "
                        f"restricted)."
                    ),
                    field="item_code",
                    metadata={"item_code": line.item_code},
                ))

        if violations:
            return self.fail_many(violations)
        return self.pass_policy()
