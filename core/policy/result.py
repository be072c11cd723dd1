"""
BOS Policy Framework — Result Models
=======================================
PolicyViolation:        one detected problem.
PolicyResult:           one policy's evaluation outcome.
AggregatedPolicyResult: every outcome of one pipeline run.

Severity ladder:
    INFO      → advisory signal (downstream triggers)
    WARNING   → advisory, transaction proceeds with awareness
    ERROR     → blocking business rule violation
    CRITICAL  → blocking systemic failure

These are pure data structures. No side effects. No persistence.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from core.policy.exceptions import PolicyViolationError


# ══════════════════════════════════════════════════════════════
# SEVERITY LEVELS
# ══════════════════════════════════════════════════════════════

class Severity(IntEnum):
    """Ordered severity. ERROR and above block the pipeline."""
    INFO = 0
    WARNING = 1
    ERROR = 2
    CRITICAL = 3

    @property
    def is_blocking(self) -> bool:
        return self >= Severity.ERROR


# ══════════════════════════════════════════════════════════════
# POLICY VIOLATION (one detected problem)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PolicyViolation:
    """
    A single, specific policy violation.

    Fields:
        code:      Machine-readable code, convention "MODULE-NNN" (e.g. INV-001).
        message:   Human-readable explanation, may embed computed values.
        severity:  Severity classification.
        field:     Optional name of the offending context attribute.
        metadata:  Structured key/value data for audit or event payloads.
    """

    code: str
    message: str
    severity: Severity = Severity.ERROR
    field: Optional[str] = None
    metadata: Mapping[str, Any] = dataclasses.field(
        default_factory=dict, hash=False
    )

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not isinstance(self.severity, Severity):
            raise ValueError(
                f"severity '{self.severity}' not valid. "
                f"Must be one of: {[s.name for s in Severity]}"
            )

        object.__setattr__(
            self, "metadata", MappingProxyType(dict(self.metadata or {}))
        )

    @property
    def is_blocking(self) -> bool:
        return self.severity.is_blocking

    def to_payload(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.name,
            "field": self.field,
            "metadata": dict(self.metadata),
        }


# ══════════════════════════════════════════════════════════════
# POLICY RESULT (single policy evaluation outcome)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PolicyResult:
    """
    Outcome of a single policy evaluation.

    Build through the named constructors (success, failure, failure_many,
    warning, info). succeeded is True iff no violation is blocking, so a
    result carrying only advisory violations still succeeds.
    """

    policy_name: str
    succeeded: bool
    violations: Tuple[PolicyViolation, ...] = ()

    def __post_init__(self):
        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

        violations = tuple(self.violations)
        for v in violations:
            if not isinstance(v, PolicyViolation):
                raise ValueError(
                    f"violations must contain PolicyViolation, "
                    f"got {type(v).__name__}."
                )
        object.__setattr__(self, "violations", violations)

        blocking = any(v.is_blocking for v in violations)
        if self.succeeded == blocking:
            raise ValueError(
                f"PolicyResult '{self.policy_name}': succeeded="
                f"{self.succeeded} contradicts its violations."
            )

    # ── Named constructors ────────────────────────────────────

    @classmethod
    def success(cls, policy_name: str) -> "PolicyResult":
        """Clean pass, no violations."""
        return cls(policy_name=policy_name, succeeded=True)

    @classmethod
    def failure(
        cls,
        policy_name: str,
        code: str,
        message: str,
        severity: Severity = Severity.ERROR,
        field: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "PolicyResult":
        """Single-violation result. Succeeds only if severity is advisory."""
        return cls.failure_many(
            policy_name,
            [PolicyViolation(code, message, severity, field, metadata or {})],
        )

    @classmethod
    def failure_many(
        cls,
        policy_name: str,
        violations: Iterable[PolicyViolation],
    ) -> "PolicyResult":
        """Multi-violation result. succeeded is computed from content."""
        violations = tuple(violations)
        return cls(
            policy_name=policy_name,
            succeeded=not any(v.is_blocking for v in violations),
            violations=violations,
        )

    @classmethod
    def warning(
        cls,
        policy_name: str,
        code: str,
        message: str,
        field: Optional[str] = None,
    ) -> "PolicyResult":
        """Advisory result. Pipeline continues, surfaced as advisory."""
        return cls.failure(
            policy_name, code, message, severity=Severity.WARNING, field=field
        )

    @classmethod
    def info(
        cls,
        policy_name: str,
        code: str,
        message: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "PolicyResult":
        """Informational signal for downstream handlers. Never blocks."""
        return cls.failure(
            policy_name, code, message,
            severity=Severity.INFO, metadata=metadata,
        )

    # ── Derived views ─────────────────────────────────────────

    @property
    def failed(self) -> bool:
        return not self.succeeded

    @property
    def has_violations(self) -> bool:
        return len(self.violations) > 0

    @property
    def has_blocking_violations(self) -> bool:
        return any(v.is_blocking for v in self.violations)

    def to_payload(self) -> dict:
        return {
            "policy_name": self.policy_name,
            "succeeded": self.succeeded,
            "violations": [v.to_payload() for v in self.violations],
        }


# ══════════════════════════════════════════════════════════════
# AGGREGATED RESULT (one pipeline run)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AggregatedPolicyResult:
    """
    Aggregate of every policy evaluated in a single pipeline run.

    Fields:
        results:            PolicyResults in execution order.
        context_type_name:  Name of the context type the pipeline ran against.
        completed_at:       UTC time the pipeline completed.

    Everything else is derived on access. The pipeline FAILS when any
    result carries a blocking (ERROR/CRITICAL) violation; INFO and WARNING
    never fail it.
    """

    results: Tuple[PolicyResult, ...]
    context_type_name: str
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "results", tuple(self.results))

    @property
    def evaluated_count(self) -> int:
        return len(self.results)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.has_blocking_violations)

    @property
    def all_violations(self) -> Tuple[PolicyViolation, ...]:
        return tuple(v for r in self.results for v in r.violations)

    @property
    def blocking_violations(self) -> Tuple[PolicyViolation, ...]:
        return tuple(v for v in self.all_violations if v.is_blocking)

    @property
    def advisory_violations(self) -> Tuple[PolicyViolation, ...]:
        return tuple(v for v in self.all_violations if not v.is_blocking)

    @property
    def is_success(self) -> bool:
        return not any(r.has_blocking_violations for r in self.results)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def throw_if_failed(self) -> None:
        """Raise PolicyViolationError if any blocking violation exists."""
        if self.is_failure:
            raise PolicyViolationError(self)

    def summary(self) -> str:
        return (
            f"[PolicyPipeline:{self.context_type_name}] "
            f"Success={self.is_success} | "
            f"Evaluated={self.evaluated_count} | "
            f"Failed={self.failed_count} | "
            f"Violations(all={len(self.all_violations)}, "
            f"blocking={len(self.blocking_violations)}, "
            f"advisory={len(self.advisory_violations)})"
        )

    def __str__(self) -> str:
        return self.summary()

    def to_payload(self) -> dict:
        """
        Serialize for audit or event payload embedding.
        Explanation tree: counts plus per-policy details.
        """
        return {
            "context_type": self.context_type_name,
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
            "is_success": self.is_success,
            "policies_evaluated": self.evaluated_count,
            "policies_failed": self.failed_count,
            "blocking_count": len(self.blocking_violations),
            "advisory_count": len(self.advisory_violations),
            "details": [r.to_payload() for r in self.results],
        }
