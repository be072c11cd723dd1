"""
BOS Policy Framework — Execution Options
===========================================
Per-call options governing one pipeline run. Passed to execute() so
different call sites can use different strategies against the same
executor instance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet


class ExecutionStrategy(Enum):
    """What the pipeline does after a blocking violation."""
    COLLECT_ALL = "COLLECT_ALL"  # Run everything; complete report
    FAIL_FAST = "FAIL_FAST"      # Stop after the first blocking rule/tier


def _default_concurrency() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class PolicyExecutionOptions:
    """
    Options for a single execute() call.

    Fields:
        strategy:                    COLLECT_ALL | FAIL_FAST.
        throw_on_failure:            Raise PolicyViolationError when failing.
        parallelize_same_order_tier: Evaluate same-order policies concurrently.
        max_concurrency:             Bound on concurrent evaluations per tier.
        bypassed_policies:           Policy names skipped for this call only.

    Parallel mode is only safe for policies that share no writable state.
    The engine does not detect or prevent such sharing.
    """

    strategy: ExecutionStrategy = ExecutionStrategy.COLLECT_ALL
    throw_on_failure: bool = False
    parallelize_same_order_tier: bool = False
    max_concurrency: int = field(default_factory=_default_concurrency)
    bypassed_policies: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if not isinstance(self.strategy, ExecutionStrategy):
            raise ValueError(
                f"strategy must be ExecutionStrategy, "
                f"got {type(self.strategy).__name__}."
            )

        if (
            isinstance(self.max_concurrency, bool)
            or not isinstance(self.max_concurrency, int)
            or self.max_concurrency < 1
        ):
            raise ValueError(
                f"max_concurrency must be an integer >= 1, "
                f"got {self.max_concurrency!r}."
            )

        object.__setattr__(
            self, "bypassed_policies", frozenset(self.bypassed_policies or ())
        )

    @property
    def is_fail_fast(self) -> bool:
        return self.strategy is ExecutionStrategy.FAIL_FAST

    def with_bypass(self, *policy_names: str) -> "PolicyExecutionOptions":
        """Copy of these options with additional bypassed names."""
        return replace(
            self,
            bypassed_policies=self.bypassed_policies | frozenset(policy_names),
        )


# ══════════════════════════════════════════════════════════════
# DEFAULT OPTIONS (CollectAll, no raise, sequential, no bypass)
# ══════════════════════════════════════════════════════════════

DEFAULT_OPTIONS = PolicyExecutionOptions()
