"""
BOS Policy Framework — Ordering Conventions
==============================================
Recommended order ranges for ERP policies. Lower runs first; equal
values form one tier.

Documentation only. The engine never enforces these ranges.
"""

from __future__ import annotations


class PolicyOrdering:
    """Order value bands shared across modules."""

    # Prerequisite guards: fast, I/O-free (null checks, status checks).
    HARD_GATE_MIN = 1
    HARD_GATE_MAX = 9

    # Core domain invariants (balanced entry, negative stock, credit limit).
    BUSINESS_RULE_MIN = 10
    BUSINESS_RULE_MAX = 49

    # Rules needing data from several bounded contexts or external services.
    CROSS_MODULE_MIN = 50
    CROSS_MODULE_MAX = 79

    # Advisory signals. Should not block.
    ADVISORY_MIN = 80
    ADVISORY_MAX = 99

    DEFAULT = 100


def describe_order(order: int) -> str:
    """Band name for an order value. Diagnostics only."""
    if order <= PolicyOrdering.HARD_GATE_MAX:
        return "hard_gate"
    if order <= PolicyOrdering.BUSINESS_RULE_MAX:
        return "business_rule"
    if order <= PolicyOrdering.CROSS_MODULE_MAX:
        return "cross_module"
    if order <= PolicyOrdering.ADVISORY_MAX:
        return "advisory"
    return "default"
