"""
BOS Policy Framework — Policy Contract
=========================================
What the pipeline engine consumes from every business policy.

Every policy must:
- Declare policy_name (stable identifier for bypass/audit)
- Declare order (lower runs first; equal values form a tier)
- Expose enabled (may be computed from settings or feature flags)
- Implement evaluate(context) → PolicyResult, sync or async
- Be stateless (constructed once, reused across many runs)
- Be side-effect free (trusted by convention, not enforced)

A general exception raised from evaluate() is contained by the engine.
asyncio.CancelledError must be allowed to propagate.

Contract validation for BasePolicy subclasses is enforced at class
creation time. Policies may also satisfy the Policy protocol directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import (
    Any,
    Awaitable,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from core.policy.ordering import PolicyOrdering
from core.policy.result import PolicyResult, PolicyViolation, Severity


# ══════════════════════════════════════════════════════════════
# STRUCTURAL CONTRACT
# ══════════════════════════════════════════════════════════════

@runtime_checkable
class Policy(Protocol):
    """Structural interface the engine relies on."""

    policy_name: str
    order: int

    @property
    def enabled(self) -> bool: ...

    def evaluate(
        self, context: Any
    ) -> Union[PolicyResult, Awaitable[PolicyResult]]: ...


# ══════════════════════════════════════════════════════════════
# BASE CLASS (optional convenience)
# ══════════════════════════════════════════════════════════════

class BasePolicy(ABC):
    """
    Abstract base for policies.

    Subclasses must:
    - Set policy_name (e.g. 'Inventory.NegativeStock')
    - Optionally set order (defaults to PolicyOrdering.DEFAULT)
    - Implement evaluate()

    Invalid declarations are rejected when the class is created.
    """

    policy_name: str = ""
    order: int = PolicyOrdering.DEFAULT

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        # Intermediate abstract classes are not validated
        if getattr(cls.evaluate, "__isabstractmethod__", False):
            return

        if not cls.policy_name or not isinstance(cls.policy_name, str):
            raise TypeError(
                f"Policy class {cls.__name__} must declare "
                f"policy_name as non-empty string."
            )

        if not isinstance(cls.order, int) or isinstance(cls.order, bool):
            raise TypeError(
                f"Policy class {cls.__name__} order "
                f"'{cls.order!r}' must be an integer."
            )

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    def evaluate(
        self, context: Any
    ) -> Union[PolicyResult, Awaitable[PolicyResult]]:
        """
        Evaluate this policy against the context.

        May be declared `async def` when it awaits data providers.
        Never mutate the context.
        """
        ...

    # ══════════════════════════════════════════════════════════
    # CONVENIENCE BUILDERS (for subclasses)
    # ══════════════════════════════════════════════════════════

    def pass_policy(self) -> PolicyResult:
        return PolicyResult.success(self.policy_name)

    def fail(
        self,
        code: str,
        message: str,
        severity: Severity = Severity.ERROR,
        field: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> PolicyResult:
        """Single blocking violation (unless severity is advisory)."""
        return PolicyResult.failure(
            self.policy_name, code, message, severity, field, metadata
        )

    def fail_many(self, violations: Iterable[PolicyViolation]) -> PolicyResult:
        return PolicyResult.failure_many(self.policy_name, violations)

    def warn(
        self, code: str, message: str, field: Optional[str] = None
    ) -> PolicyResult:
        """Advisory warning. The result still succeeds."""
        return PolicyResult.warning(self.policy_name, code, message, field)

    def signal(
        self,
        code: str,
        message: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> PolicyResult:
        """Informational signal for downstream handlers."""
        return PolicyResult.info(self.policy_name, code, message, metadata)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(policy_name={self.policy_name!r}, "
            f"order={self.order})"
        )
