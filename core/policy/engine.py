"""
BOS Policy Framework — Pipeline Engine
=========================================
Runs the policies registered for one context type and folds their
outcomes into a single AggregatedPolicyResult.

Flow per execute():
1. Select   — drop disabled policies (read fresh) and bypassed names
2. Group    — consecutive same-order policies form a tier
3. Execute  — tiers in ascending order; members sequential or concurrent
4. Contain  — any exception from a policy becomes a CRITICAL violation
5. Aggregate
6. Optionally raise PolicyViolationError

GUARANTEE: a faulting policy never crashes the pipeline.
EXCEPTION: asyncio.CancelledError always propagates and aborts the run.

The engine does NOT:
- Persist anything
- Retry failed policies
- Impose timeouts (callers wrap execute() in asyncio.timeout)
- Lock or isolate state shared between concurrent policies
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from itertools import groupby
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from core.policy.contracts import Policy
from core.policy.options import DEFAULT_OPTIONS, PolicyExecutionOptions
from core.policy.ordering import describe_order
from core.policy.result import AggregatedPolicyResult, PolicyResult, Severity
from core.time import Clock, get_default_clock

logger = logging.getLogger("bos.policy")

POLICY_EXCEPTION_CODE = "POLICY_EXCEPTION"


def _exception_type_name(exc: BaseException) -> str:
    exc_type = type(exc)
    if exc_type.__module__ == "builtins":
        return exc_type.__qualname__
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


class PolicyExecutor:
    """
    Pipeline executor for one context type.

    Policies are sorted once at construction (stable, ascending by order,
    ties keep registration order). The executor holds no per-call state
    and is safe to reuse across calls and event loops.

    Usage:
        executor = PolicyExecutor(
            [NegativeStockPolicy(), MaxStockLevelPolicy()],
            context_type=InventoryAdjustmentContext,
        )
        result = await executor.execute(ctx, PolicyExecutionOptions(
            strategy=ExecutionStrategy.FAIL_FAST,
        ))
        if not result.is_success:
            ...
    """

    def __init__(
        self,
        policies: Iterable[Policy],
        context_type: Optional[type] = None,
        clock: Optional[Clock] = None,
    ):
        self._policies: Tuple[Policy, ...] = tuple(
            sorted(policies, key=lambda p: p.order)
        )
        self._context_type = context_type
        self._clock = clock

        logger.debug(
            f"PolicyExecutor<{self.context_type_name}> initialized with "
            f"{len(self._policies)} registered policies: "
            f"[{', '.join(p.policy_name for p in self._policies)}]"
        )

    @property
    def policies(self) -> Tuple[Policy, ...]:
        """Registered policies in execution order."""
        return self._policies

    @property
    def context_type_name(self) -> str:
        if self._context_type is None:
            return "Any"
        return self._context_type.__name__

    # ══════════════════════════════════════════════════════════
    # PUBLIC ENTRY POINTS
    # ══════════════════════════════════════════════════════════

    async def execute(
        self,
        context: Any,
        options: Optional[PolicyExecutionOptions] = None,
    ) -> AggregatedPolicyResult:
        """
        Run the pipeline against context.

        Returns the aggregate. Raises PolicyViolationError only when
        options.throw_on_failure is set and the run failed. Cancellation
        of the calling task propagates unchanged.
        """
        if options is None:
            options = DEFAULT_OPTIONS

        selected = self._select(options)

        logger.info(
            f"PolicyPipeline starting | Context={self.context_type_name} | "
            f"Strategy={options.strategy.value} | "
            f"Parallel={options.parallelize_same_order_tier} | "
            f"Registered={len(self._policies)} | Enabled={len(selected)}"
        )

        results = await self._execute_tiers(
            self._group_tiers(selected), context, options
        )

        aggregated = AggregatedPolicyResult(
            results=tuple(results),
            context_type_name=self.context_type_name,
            completed_at=(self._clock or get_default_clock()).now_utc(),
        )

        self._log_completion(aggregated)

        if options.throw_on_failure:
            aggregated.throw_if_failed()

        return aggregated

    def execute_sync(
        self,
        context: Any,
        options: Optional[PolicyExecutionOptions] = None,
    ) -> AggregatedPolicyResult:
        """Blocking wrapper for call sites without a running event loop."""
        return asyncio.run(self.execute(context, options))

    # ══════════════════════════════════════════════════════════
    # SELECTION & TIERING
    # ══════════════════════════════════════════════════════════

    def _select(self, options: PolicyExecutionOptions) -> List[Policy]:
        bypassed = options.bypassed_policies
        selected = []
        for policy in self._policies:
            if policy.policy_name in bypassed:
                logger.debug(f"Policy '{policy.policy_name}' bypassed for this call.")
                continue
            if not policy.enabled:
                logger.debug(f"Policy '{policy.policy_name}' is disabled.")
                continue
            selected.append(policy)
        return selected

    @staticmethod
    def _group_tiers(policies: Sequence[Policy]) -> List[List[Policy]]:
        """Maximal runs of consecutive policies sharing one order value."""
        return [list(tier) for _, tier in groupby(policies, key=lambda p: p.order)]

    # ══════════════════════════════════════════════════════════
    # EXECUTION
    # ══════════════════════════════════════════════════════════

    async def _execute_tiers(
        self,
        tiers: List[List[Policy]],
        context: Any,
        options: PolicyExecutionOptions,
    ) -> List[PolicyResult]:
        results: List[PolicyResult] = []

        for tier in tiers:
            tier_order = tier[0].order

            if options.parallelize_same_order_tier and len(tier) > 1:
                logger.debug(
                    f"PolicyPipeline executing Order-tier {tier_order} with "
                    f"{len(tier)} policies in parallel "
                    f"(max_concurrency={options.max_concurrency})."
                )
                tier_results = await self._execute_tier_concurrently(
                    tier, context, options.max_concurrency
                )
                results.extend(tier_results)

                if options.is_fail_fast and any(
                    r.has_blocking_violations for r in tier_results
                ):
                    logger.info(
                        f"PolicyPipeline FailFast triggered in Order-tier "
                        f"{tier_order}. Stopping pipeline."
                    )
                    break
                continue

            stop = False
            for policy in tier:
                result = await self._execute_single(policy, context)
                results.append(result)

                if options.is_fail_fast and result.has_blocking_violations:
                    logger.info(
                        f"PolicyPipeline FailFast triggered by "
                        f"'{policy.policy_name}' (Order={policy.order}). "
                        f"Stopping pipeline early."
                    )
                    stop = True
                    break
            if stop:
                break

        return results

    async def _execute_tier_concurrently(
        self,
        tier: List[Policy],
        context: Any,
        max_concurrency: int,
    ) -> List[PolicyResult]:
        """
        Evaluate one tier concurrently, at most max_concurrency at a time.
        Results come back in tier order, not completion order.
        """
        semaphore = asyncio.Semaphore(max_concurrency)

        async def run(policy: Policy) -> PolicyResult:
            async with semaphore:
                return await self._execute_single(
                    policy, context, offload_sync=True
                )

        tasks = [asyncio.ensure_future(run(policy)) for policy in tier]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # Cancellation: abandon the rest of the tier and wait for it
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _execute_single(
        self,
        policy: Policy,
        context: Any,
        offload_sync: bool = False,
    ) -> PolicyResult:
        """
        Evaluate one policy with full fault isolation.

        With offload_sync, a synchronous evaluate() runs in a worker
        thread so blocking policies in a concurrent tier overlap and the
        event loop stays free for caller deadlines.

        Any Exception (including a non-PolicyResult return value) is
        converted into a CRITICAL POLICY_EXCEPTION result.
        asyncio.CancelledError is a BaseException and passes through.
        """
        logger.debug(
            f"Evaluating policy '{policy.policy_name}' "
            f"(Order={policy.order}, band={describe_order(policy.order)})"
        )

        try:
            if offload_sync and not inspect.iscoroutinefunction(policy.evaluate):
                outcome = await asyncio.to_thread(policy.evaluate, context)
            else:
                outcome = policy.evaluate(context)
            if inspect.isawaitable(outcome):
                outcome = await outcome

            if not isinstance(outcome, PolicyResult):
                raise TypeError(
                    f"Policy returned {type(outcome).__name__}, "
                    f"expected PolicyResult."
                )
        except Exception as exc:
            logger.error(
                f"PolicyExecutor: policy '{policy.policy_name}' raised an "
                f"unhandled {type(exc).__name__}. Converting to CRITICAL "
                f"violation to preserve pipeline integrity.",
                exc_info=exc,
            )
            return PolicyResult.failure(
                policy.policy_name,
                code=POLICY_EXCEPTION_CODE,
                message=(
                    f"Policy '{policy.policy_name}' encountered an "
                    f"unexpected error: {exc}"
                ),
                severity=Severity.CRITICAL,
                metadata={
                    "exception_type": _exception_type_name(exc),
                    "exception_message": str(exc),
                    "policy_order": policy.order,
                },
            )

        if outcome.has_blocking_violations:
            logger.debug(
                f"Policy '{policy.policy_name}' FAILED with "
                f"{len(outcome.violations)} violation(s): "
                f"[{', '.join(v.code for v in outcome.violations)}]"
            )
        elif outcome.has_violations:
            logger.debug(
                f"Policy '{policy.policy_name}' passed with "
                f"{len(outcome.violations)} advisory violation(s): "
                f"[{', '.join(v.code for v in outcome.violations)}]"
            )
        else:
            logger.debug(f"Policy '{policy.policy_name}' passed cleanly.")

        return outcome

    # ══════════════════════════════════════════════════════════
    # DIAGNOSTICS
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def _log_completion(aggregated: AggregatedPolicyResult) -> None:
        logger.info(f"PolicyPipeline complete | {aggregated.summary()}")

        if aggregated.is_success:
            return

        for violation in aggregated.blocking_violations:
            logger.warning(
                f"PolicyViolation | Context={aggregated.context_type_name} | "
                f"Code={violation.code} | Severity={violation.severity.name} | "
                f"Field={violation.field or '-'} | Message={violation.message}"
            )
