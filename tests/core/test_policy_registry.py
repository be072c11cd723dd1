"""
BOS Policy Framework — Registry Tests
=======================================
Registration, duplicate detection, lock-after-bootstrap, factories,
and dispatch by context type.
"""

from __future__ import annotations

from typing import Any

import pytest

from core.policy import (
    BasePolicy,
    DuplicatePolicyError,
    PolicyOrdering,
    PolicyRegistry,
    PolicyResult,
    RegistryLockedError,
    UnknownContextError,
    describe_order,
)


class OrderContext:
    pass


class RushOrderContext(OrderContext):
    pass


class InvoiceContext:
    pass


class GatePolicy(BasePolicy):
    policy_name = "Test.Gate"
    order = PolicyOrdering.HARD_GATE_MIN

    def evaluate(self, context: Any) -> PolicyResult:
        return self.pass_policy()


class LimitPolicy(BasePolicy):
    policy_name = "Test.Limit"
    order = PolicyOrdering.BUSINESS_RULE_MIN

    def __init__(self, limit: int = 10):
        self.limit = limit

    async def evaluate(self, context: Any) -> PolicyResult:
        return self.fail("T-LIMIT", f"Limit {self.limit} exceeded.")


@pytest.fixture
def registry():
    return PolicyRegistry()


# ══════════════════════════════════════════════════════════════
# REGISTRATION
# ══════════════════════════════════════════════════════════════

class TestRegistration:
    def test_register_and_query(self, registry):
        registry.register(OrderContext, LimitPolicy())
        registry.register(OrderContext, GatePolicy())

        assert registry.context_types() == (OrderContext,)
        assert [p.policy_name for p in registry.policies_for(OrderContext)] == [
            "Test.Gate", "Test.Limit",
        ]
        assert registry.policy_count() == 2

    def test_duplicate_name_rejected(self, registry):
        registry.register(OrderContext, GatePolicy())
        with pytest.raises(DuplicatePolicyError, match="Test.Gate"):
            registry.register(OrderContext, GatePolicy())

    def test_same_name_allowed_for_other_context(self, registry):
        registry.register(OrderContext, GatePolicy())
        registry.register(InvoiceContext, GatePolicy())
        assert registry.policy_count() == 2

    def test_non_policy_rejected(self, registry):
        with pytest.raises(TypeError, match="Policy"):
            registry.register(OrderContext, object())

    def test_non_callable_factory_rejected(self, registry):
        with pytest.raises(TypeError, match="factory"):
            registry.register_factory(OrderContext, "LimitPolicy")

    def test_factory_resolved_at_lock(self, registry):
        calls = []

        def factory():
            calls.append(1)
            return LimitPolicy(limit=3)

        registry.register_factory(OrderContext, factory)
        assert calls == []

        registry.lock()
        [policy] = registry.policies_for(OrderContext)
        assert calls == [1]
        assert policy.limit == 3

    def test_factory_duplicate_detected_at_lock(self, registry):
        registry.register(OrderContext, LimitPolicy())
        registry.register_factory(OrderContext, lambda: LimitPolicy(limit=5))
        with pytest.raises(DuplicatePolicyError):
            registry.lock()

    def test_factory_returning_non_policy_rejected_at_lock(self, registry):
        registry.register_factory(OrderContext, lambda: "nope")
        with pytest.raises(TypeError):
            registry.lock()


# ══════════════════════════════════════════════════════════════
# LOCK
# ══════════════════════════════════════════════════════════════

class TestLock:
    def test_register_after_lock_rejected(self, registry):
        registry.register(OrderContext, GatePolicy())
        registry.lock()

        assert registry.is_locked
        with pytest.raises(RegistryLockedError):
            registry.register(OrderContext, LimitPolicy())
        with pytest.raises(RegistryLockedError):
            registry.register_factory(OrderContext, LimitPolicy)

    def test_lock_is_idempotent(self, registry):
        registry.register(OrderContext, GatePolicy())
        registry.lock()
        executor = registry.executor_for(OrderContext)
        registry.lock()
        assert registry.executor_for(OrderContext) is executor

    def test_queries_lock_lazily(self, registry):
        registry.register(OrderContext, GatePolicy())
        registry.executor_for(OrderContext)
        assert registry.is_locked


# ══════════════════════════════════════════════════════════════
# DISPATCH
# ══════════════════════════════════════════════════════════════

class TestDispatch:
    @pytest.mark.asyncio
    async def test_execute_routes_by_context_type(self, registry):
        registry.register(OrderContext, GatePolicy())
        registry.register(InvoiceContext, LimitPolicy())

        order_result = await registry.execute(OrderContext())
        invoice_result = await registry.execute(InvoiceContext())

        assert order_result.is_success
        assert order_result.context_type_name == "OrderContext"
        assert invoice_result.is_failure
        assert invoice_result.context_type_name == "InvoiceContext"

    @pytest.mark.asyncio
    async def test_subclass_resolves_to_registered_base(self, registry):
        registry.register(OrderContext, LimitPolicy())

        result = await registry.execute(RushOrderContext())

        assert result.evaluated_count == 1
        assert result.context_type_name == "OrderContext"

    @pytest.mark.asyncio
    async def test_unknown_context_rejected(self, registry):
        registry.register(OrderContext, GatePolicy())
        with pytest.raises(UnknownContextError, match="InvoiceContext"):
            await registry.execute(InvoiceContext())

    @pytest.mark.asyncio
    async def test_none_context_rejected(self, registry):
        with pytest.raises(ValueError, match="context"):
            await registry.execute(None)


# ══════════════════════════════════════════════════════════════
# CONTRACT VALIDATION
# ══════════════════════════════════════════════════════════════

class TestPolicyContract:
    def test_missing_name_rejected_at_class_creation(self):
        with pytest.raises(TypeError, match="policy_name"):
            class Nameless(BasePolicy):
                def evaluate(self, context):
                    return self.pass_policy()

    def test_non_integer_order_rejected(self):
        with pytest.raises(TypeError, match="order"):
            class BadOrder(BasePolicy):
                policy_name = "Test.BadOrder"
                order = "first"

                def evaluate(self, context):
                    return self.pass_policy()

    def test_abstract_intermediate_not_validated(self):
        from abc import abstractmethod

        class ModulePolicy(BasePolicy):
            @abstractmethod
            def evaluate(self, context):
                ...

        class Concrete(ModulePolicy):
            policy_name = "Test.Concrete"

            def evaluate(self, context):
                return self.pass_policy()

        assert Concrete().order == PolicyOrdering.DEFAULT

    def test_repr(self):
        assert repr(GatePolicy()) == "GatePolicy(policy_name='Test.Gate', order=1)"


class TestOrderBands:
    @pytest.mark.parametrize("order, band", [
        (1, "hard_gate"),
        (9, "hard_gate"),
        (10, "business_rule"),
        (49, "business_rule"),
        (50, "cross_module"),
        (80, "advisory"),
        (99, "advisory"),
        (PolicyOrdering.DEFAULT, "default"),
    ])
    def test_band_names(self, order, band):
        assert describe_order(order) == band
