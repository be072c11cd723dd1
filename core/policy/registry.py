"""
BOS Policy Framework — Policy Registry
=========================================
Explicit registration of policies per context type, replacing any
runtime type scanning.

Responsibilities:
- Register policy instances or zero-argument factories per context type
- Enforce unique policy_name within a context type
- Lock after bootstrap, resolving factories and freezing one
  PolicyExecutor (the fixed execution plan) per context type
- Dispatch execute(context) to the executor for type(context)

No dynamic imports. All policies registered explicitly.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from core.policy.contracts import Policy
from core.policy.engine import PolicyExecutor
from core.policy.exceptions import (
    DuplicatePolicyError,
    RegistryLockedError,
    UnknownContextError,
)
from core.policy.options import PolicyExecutionOptions
from core.policy.result import AggregatedPolicyResult
from core.time import Clock

logger = logging.getLogger("bos.policy.registry")

PolicyFactory = Callable[[], Policy]


class PolicyRegistry:
    """
    Registry of policies keyed by context type.

    Thread-safe. Lock-after-bootstrap.

    Usage:
        registry = PolicyRegistry()
        registry.register(InventoryAdjustmentContext, NegativeStockPolicy())
        registry.register_factory(
            InventoryAdjustmentContext,
            lambda: AdjustmentReasonMandatoryPolicy(threshold=Decimal("-50")),
        )
        registry.lock()

        result = await registry.execute(ctx)
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._entries: Dict[type, List[Union[Policy, PolicyFactory]]] = {}
        self._executors: Dict[type, PolicyExecutor] = {}
        self._clock = clock
        self._locked: bool = False
        self._lock = Lock()

    # ══════════════════════════════════════════════════════════
    # REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register(self, context_type: type, policy: Policy) -> None:
        """Register a policy instance for a context type."""
        self._check_policy(policy)

        with self._lock:
            if self._locked:
                raise RegistryLockedError()

            entries = self._entries.setdefault(context_type, [])
            existing = {
                e.policy_name for e in entries if not self._is_factory(e)
            }
            if policy.policy_name in existing:
                raise DuplicatePolicyError(
                    policy.policy_name, context_type.__name__
                )
            entries.append(policy)

            logger.info(
                f"Policy registered: {policy.policy_name} "
                f"[order={policy.order}] context={context_type.__name__}"
            )

    def register_factory(
        self, context_type: type, factory: PolicyFactory
    ) -> None:
        """
        Register a factory, called once at lock() time.
        Use for policies whose construction needs configuration.
        """
        if not callable(factory):
            raise TypeError(
                f"Expected a callable policy factory, "
                f"got {type(factory).__name__}."
            )

        with self._lock:
            if self._locked:
                raise RegistryLockedError()
            self._entries.setdefault(context_type, []).append(factory)

            logger.info(
                f"Policy factory registered for context={context_type.__name__}"
            )

    # ══════════════════════════════════════════════════════════
    # LOCK (build execution plans)
    # ══════════════════════════════════════════════════════════

    def lock(self) -> None:
        """
        Resolve factories and build one executor per context type.
        Idempotent. No registration is accepted afterwards.
        """
        with self._lock:
            if self._locked:
                return

            executors: Dict[type, PolicyExecutor] = {}
            for context_type, entries in self._entries.items():
                resolved: List[Policy] = []
                seen = set()
                for entry in entries:
                    policy = entry() if self._is_factory(entry) else entry
                    self._check_policy(policy)
                    if policy.policy_name in seen:
                        raise DuplicatePolicyError(
                            policy.policy_name, context_type.__name__
                        )
                    seen.add(policy.policy_name)
                    resolved.append(policy)

                executors[context_type] = PolicyExecutor(
                    resolved, context_type=context_type, clock=self._clock
                )

            self._executors = executors
            self._locked = True

            logger.info(
                f"Policy Registry LOCKED — {len(executors)} context(s), "
                f"{sum(len(e.policies) for e in executors.values())} policies"
            )

    @property
    def is_locked(self) -> bool:
        with self._lock:
            return self._locked

    # ══════════════════════════════════════════════════════════
    # DISPATCH
    # ══════════════════════════════════════════════════════════

    def executor_for(self, context_type: type) -> PolicyExecutor:
        """
        Executor for a context type. Subclasses of a registered context
        type resolve to the nearest registered base. Locks lazily.
        """
        if not self.is_locked:
            self.lock()

        for candidate in context_type.__mro__:
            executor = self._executors.get(candidate)
            if executor is not None:
                return executor

        raise UnknownContextError(context_type.__name__)

    async def execute(
        self,
        context: Any,
        options: Optional[PolicyExecutionOptions] = None,
    ) -> AggregatedPolicyResult:
        """Non-generic entry point: route by type(context)."""
        if context is None:
            raise ValueError("context must not be None.")
        return await self.executor_for(type(context)).execute(context, options)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def context_types(self) -> Tuple[type, ...]:
        with self._lock:
            return tuple(self._entries)

    def policies_for(self, context_type: type) -> Tuple[Policy, ...]:
        """Policies for a context type in execution order."""
        return self.executor_for(context_type).policies

    def policy_count(self) -> int:
        if not self.is_locked:
            self.lock()
        return sum(len(e.policies) for e in self._executors.values())

    # ══════════════════════════════════════════════════════════
    # HELPERS
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def _is_factory(entry: Any) -> bool:
        if isinstance(entry, type):
            return True
        return not isinstance(entry, Policy) and callable(entry)

    @staticmethod
    def _check_policy(policy: Any) -> None:
        if not isinstance(policy, Policy):
            raise TypeError(
                f"Expected a Policy (policy_name, order, enabled, "
                f"evaluate), got {type(policy).__name__}."
            )
