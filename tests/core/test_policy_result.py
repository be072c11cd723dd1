"""
BOS Policy Framework — Result Model Tests
==========================================
Severity ladder, violation validation, named constructors and
aggregate views.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.policy.exceptions import PolicyViolationError
from core.policy.result import (
    AggregatedPolicyResult,
    PolicyResult,
    PolicyViolation,
    Severity,
)


def aggregate(*results: PolicyResult) -> AggregatedPolicyResult:
    return AggregatedPolicyResult(
        results=results,
        context_type_name="TestContext",
        completed_at=datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc),
    )


# ══════════════════════════════════════════════════════════════
# SEVERITY
# ══════════════════════════════════════════════════════════════

class TestSeverity:
    def test_ordering(self):
        assert Severity.INFO < Severity.WARNING < Severity.ERROR < Severity.CRITICAL

    def test_blocking_levels(self):
        assert not Severity.INFO.is_blocking
        assert not Severity.WARNING.is_blocking
        assert Severity.ERROR.is_blocking
        assert Severity.CRITICAL.is_blocking


# ══════════════════════════════════════════════════════════════
# POLICY VIOLATION
# ══════════════════════════════════════════════════════════════

class TestPolicyViolation:
    def test_defaults(self):
        v = PolicyViolation("INV-001", "Negative stock.")
        assert v.severity == Severity.ERROR
        assert v.field is None
        assert dict(v.metadata) == {}
        assert v.is_blocking

    def test_empty_code_rejected(self):
        with pytest.raises(ValueError, match="code"):
            PolicyViolation("", "message")

    def test_empty_message_rejected(self):
        with pytest.raises(ValueError, match="message"):
            PolicyViolation("X-001", "")

    def test_invalid_severity_rejected(self):
        with pytest.raises(ValueError, match="severity"):
            PolicyViolation("X-001", "message", severity="ERROR")

    def test_metadata_is_read_only(self):
        source = {"current_stock": 5}
        v = PolicyViolation("X-001", "message", metadata=source)
        source["current_stock"] = 99
        assert v.metadata["current_stock"] == 5
        with pytest.raises(TypeError):
            v.metadata["current_stock"] = 1

    def test_payload(self):
        v = PolicyViolation(
            "ACC-003", "Cost center missing.",
            severity=Severity.ERROR, field="cost_center",
        )
        assert v.to_payload() == {
            "code": "ACC-003",
            "message": "Cost center missing.",
            "severity": "ERROR",
            "field": "cost_center",
            "metadata": {},
        }


# ══════════════════════════════════════════════════════════════
# POLICY RESULT
# ══════════════════════════════════════════════════════════════

class TestPolicyResult:
    def test_success(self):
        r = PolicyResult.success("A")
        assert r.succeeded
        assert not r.failed
        assert r.violations == ()
        assert not r.has_violations

    def test_failure_is_blocking(self):
        r = PolicyResult.failure("B", "T-001", "broken")
        assert r.failed
        assert r.has_blocking_violations
        assert r.violations[0].severity == Severity.ERROR

    def test_failure_with_advisory_severity_succeeds(self):
        r = PolicyResult.failure("B", "T-W009", "heads up", severity=Severity.WARNING)
        assert r.succeeded
        assert r.has_violations
        assert not r.has_blocking_violations

    def test_failure_many_mixed(self):
        r = PolicyResult.failure_many("S", [
            PolicyViolation("S-W1", "warn", Severity.WARNING),
            PolicyViolation("S-1", "error", Severity.ERROR),
        ])
        assert r.failed
        assert len(r.violations) == 2

    def test_failure_many_advisory_only_succeeds(self):
        r = PolicyResult.failure_many("S", [
            PolicyViolation("S-I1", "info", Severity.INFO),
        ])
        assert r.succeeded

    def test_warning(self):
        r = PolicyResult.warning("C", "T-W001", "careful", field="qty")
        assert r.succeeded
        assert r.violations[0].severity == Severity.WARNING
        assert r.violations[0].field == "qty"

    def test_info(self):
        r = PolicyResult.info("I", "T-I001", "note", metadata={"k": 1})
        assert r.succeeded
        assert r.violations[0].severity == Severity.INFO
        assert r.violations[0].metadata["k"] == 1

    def test_contradictory_construction_rejected(self):
        with pytest.raises(ValueError, match="contradicts"):
            PolicyResult(policy_name="X", succeeded=True, violations=(
                PolicyViolation("X-1", "error"),
            ))
        with pytest.raises(ValueError, match="contradicts"):
            PolicyResult(policy_name="X", succeeded=False)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="policy_name"):
            PolicyResult.success("")

    def test_non_violation_rejected(self):
        with pytest.raises(ValueError, match="PolicyViolation"):
            PolicyResult(policy_name="X", succeeded=True, violations=("oops",))


# ══════════════════════════════════════════════════════════════
# AGGREGATED RESULT
# ══════════════════════════════════════════════════════════════

class TestAggregatedPolicyResult:
    def test_empty_aggregate_succeeds(self):
        agg = aggregate()
        assert agg.is_success
        assert agg.evaluated_count == 0
        assert agg.failed_count == 0
        assert agg.all_violations == ()

    def test_views_partition_violations(self):
        agg = aggregate(
            PolicyResult.success("A"),
            PolicyResult.failure("B", "T-001", "fail"),
            PolicyResult.warning("C", "T-W001", "warn"),
        )
        assert agg.evaluated_count == 3
        assert agg.failed_count == 1
        assert agg.is_failure
        assert [v.code for v in agg.all_violations] == ["T-001", "T-W001"]
        assert [v.code for v in agg.blocking_violations] == ["T-001"]
        assert [v.code for v in agg.advisory_violations] == ["T-W001"]

    def test_advisory_only_succeeds(self):
        agg = aggregate(
            PolicyResult.warning("C", "T-W001", "warn"),
            PolicyResult.info("D", "T-I001", "info"),
        )
        assert agg.is_success
        assert len(agg.advisory_violations) == 2

    def test_throw_if_failed_carries_aggregate(self):
        agg = aggregate(
            PolicyResult.failure("B", "T-001", "stock is short"),
            PolicyResult.failure("E", "T-002", "boom", severity=Severity.CRITICAL),
        )
        with pytest.raises(PolicyViolationError) as exc_info:
            agg.throw_if_failed()
        assert exc_info.value.result is agg
        message = str(exc_info.value)
        assert "2 blocking violation(s)" in message
        assert "[T-001] stock is short" in message
        assert "[T-002] boom" in message

    def test_throw_if_failed_noop_on_success(self):
        aggregate(PolicyResult.warning("C", "T-W001", "warn")).throw_if_failed()

    def test_summary(self):
        agg = aggregate(
            PolicyResult.success("A"),
            PolicyResult.failure("B", "T-001", "fail"),
        )
        assert agg.summary() == (
            "[PolicyPipeline:TestContext] Success=False | Evaluated=2 | "
            "Failed=1 | Violations(all=1, blocking=1, advisory=0)"
        )
        assert str(agg) == agg.summary()

    def test_payload(self):
        agg = aggregate(PolicyResult.warning("C", "T-W001", "warn"))
        payload = agg.to_payload()
        assert payload["context_type"] == "TestContext"
        assert payload["completed_at"] == "2026-03-01T09:30:00+00:00"
        assert payload["is_success"] is True
        assert payload["policies_evaluated"] == 1
        assert payload["advisory_count"] == 1
        assert payload["details"][0]["policy_name"] == "C"
