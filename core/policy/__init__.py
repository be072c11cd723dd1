"""
BOS Policy Framework — Business Policy Pipeline
==================================================
Ordered, fault-contained evaluation of business policies against a
transaction context.

Policies evaluate, they do not execute.
Every violation is structured.
A faulting policy never crashes the pipeline.
"""

from core.policy.contracts import BasePolicy, Policy
from core.policy.engine import POLICY_EXCEPTION_CODE, PolicyExecutor
from core.policy.exceptions import (
    DuplicatePolicyError,
    PolicyFrameworkError,
    PolicyViolationError,
    RegistryLockedError,
    UnknownContextError,
)
from core.policy.options import (
    DEFAULT_OPTIONS,
    ExecutionStrategy,
    PolicyExecutionOptions,
)
from core.policy.ordering import PolicyOrdering, describe_order
from core.policy.registry import PolicyRegistry
from core.policy.result import (
    AggregatedPolicyResult,
    PolicyResult,
    PolicyViolation,
    Severity,
)

__all__ = [
    # ── Contract ──────────────────────────────────────────────
    "Policy",
    "BasePolicy",
    "PolicyOrdering",
    "describe_order",
    # ── Engine ────────────────────────────────────────────────
    "PolicyExecutor",
    "POLICY_EXCEPTION_CODE",
    "ExecutionStrategy",
    "PolicyExecutionOptions",
    "DEFAULT_OPTIONS",
    # ── Registry ──────────────────────────────────────────────
    "PolicyRegistry",
    # ── Results ───────────────────────────────────────────────
    "Severity",
    "PolicyViolation",
    "PolicyResult",
    "AggregatedPolicyResult",
    # ── Exceptions ────────────────────────────────────────────
    "PolicyFrameworkError",
    "PolicyViolationError",
    "DuplicatePolicyError",
    "RegistryLockedError",
    "UnknownContextError",
]
