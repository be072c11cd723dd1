"""
BOS Policy Framework — Exceptions
====================================
Structured errors for policy framework operations.

Business violations are NOT errors. They flow through
PolicyViolation → PolicyResult → AggregatedPolicyResult.

Only two conditions escape a pipeline run abnormally:
- asyncio.CancelledError (always propagated, never converted)
- PolicyViolationError   (only when throw_on_failure is requested)

The remaining errors here are wiring-time errors raised by the registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.policy.result import AggregatedPolicyResult


class PolicyFrameworkError(Exception):
    """Base error for policy framework operations."""
    pass


class PolicyViolationError(PolicyFrameworkError):
    """
    Pipeline finished with blocking violations and the caller asked
    for exception-based handling. Carries the full aggregate so the
    catcher loses nothing relative to the value-returning path.
    """

    def __init__(self, result: "AggregatedPolicyResult"):
        self.result = result
        violations = "; ".join(
            f"[{v.code}] {v.message}" for v in result.blocking_violations
        )
        super().__init__(
            f"Policy pipeline '{result.context_type_name}' failed with "
            f"{len(result.blocking_violations)} blocking violation(s). "
            f"Violations: {violations}"
        )


class DuplicatePolicyError(PolicyFrameworkError):
    """Policy with the same name already registered for a context type."""

    def __init__(self, policy_name: str, context_type_name: str):
        self.policy_name = policy_name
        self.context_type_name = context_type_name
        super().__init__(
            f"Policy '{policy_name}' is already registered "
            f"for context '{context_type_name}'."
        )


class RegistryLockedError(PolicyFrameworkError):
    """Policy registry is locked — no modifications allowed."""

    def __init__(self):
        super().__init__(
            "Policy Registry is locked after bootstrap. "
            "No dynamic policy registration allowed."
        )


class UnknownContextError(PolicyFrameworkError):
    """No policies were registered for the requested context type."""

    def __init__(self, context_type_name: str):
        self.context_type_name = context_type_name
        super().__init__(
            f"No policy executor registered for context "
            f"'{context_type_name}'."
        )
