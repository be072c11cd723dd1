"""
BOS Policy Framework — Host Settings
=======================================
Host-tunable knobs for the policy framework, read from the
POLICY_FRAMEWORK dict in Django settings:

    POLICY_FRAMEWORK = {
        "FUTURE_DATE_POSTING_MAX_DAYS": 60,
        "CREDIT_LIMIT_WARNING_THRESHOLD": "0.85",
        "ADJUSTMENT_REASON_MANDATORY_THRESHOLD": "-50",
        "DISABLED_POLICIES": ["Accounting.DualControlManualEntry"],
        "DEFAULT_STRATEGY": "COLLECT_ALL",
        "PARALLELIZE_SAME_ORDER_TIER": False,
        "MAX_CONCURRENCY": 4,
    }

Missing keys take defaults. Unknown keys are a configuration error.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, FrozenSet, Mapping, Optional

from django.core.exceptions import ImproperlyConfigured

from core.policy.options import ExecutionStrategy, PolicyExecutionOptions

SETTINGS_KEY = "POLICY_FRAMEWORK"

_KNOWN_KEYS = frozenset({
    "FUTURE_DATE_POSTING_MAX_DAYS",
    "CREDIT_LIMIT_WARNING_THRESHOLD",
    "ADJUSTMENT_REASON_MANDATORY_THRESHOLD",
    "DISABLED_POLICIES",
    "DEFAULT_STRATEGY",
    "PARALLELIZE_SAME_ORDER_TIER",
    "MAX_CONCURRENCY",
})


def _to_decimal(key: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ImproperlyConfigured(
            f"{SETTINGS_KEY}['{key}'] must be a decimal number, got {value!r}."
        ) from exc


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ImproperlyConfigured(
            f"{SETTINGS_KEY}['{key}'] must be an integer, got {value!r}."
        )
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(
            f"{SETTINGS_KEY}['{key}'] must be an integer, got {value!r}."
        ) from exc


@dataclass(frozen=True)
class PolicyFrameworkSettings:
    """Immutable snapshot of the POLICY_FRAMEWORK settings."""

    future_date_posting_max_days: int = 60
    credit_limit_warning_threshold: Decimal = Decimal("0.85")
    adjustment_reason_mandatory_threshold: Decimal = Decimal("-50")
    disabled_policies: FrozenSet[str] = frozenset()
    default_strategy: ExecutionStrategy = ExecutionStrategy.COLLECT_ALL
    parallelize_same_order_tier: bool = False
    max_concurrency: Optional[int] = None

    def __post_init__(self) -> None:
        if self.future_date_posting_max_days < 0:
            raise ImproperlyConfigured(
                "FUTURE_DATE_POSTING_MAX_DAYS must be non-negative."
            )
        if not Decimal("0") < self.credit_limit_warning_threshold <= Decimal("1"):
            raise ImproperlyConfigured(
                "CREDIT_LIMIT_WARNING_THRESHOLD must be in (0, 1]."
            )
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ImproperlyConfigured("MAX_CONCURRENCY must be >= 1.")

    # ══════════════════════════════════════════════════════════
    # LOADERS
    # ══════════════════════════════════════════════════════════

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "PolicyFrameworkSettings":
        mapping = dict(mapping or {})

        unknown = set(mapping) - _KNOWN_KEYS
        if unknown:
            raise ImproperlyConfigured(
                f"Unknown {SETTINGS_KEY} setting(s): {sorted(unknown)}"
            )

        kwargs: dict = {}

        if "FUTURE_DATE_POSTING_MAX_DAYS" in mapping:
            kwargs["future_date_posting_max_days"] = _to_int(
                "FUTURE_DATE_POSTING_MAX_DAYS",
                mapping["FUTURE_DATE_POSTING_MAX_DAYS"],
            )

        if "CREDIT_LIMIT_WARNING_THRESHOLD" in mapping:
            kwargs["credit_limit_warning_threshold"] = _to_decimal(
                "CREDIT_LIMIT_WARNING_THRESHOLD",
                mapping["CREDIT_LIMIT_WARNING_THRESHOLD"],
            )

        if "ADJUSTMENT_REASON_MANDATORY_THRESHOLD" in mapping:
            kwargs["adjustment_reason_mandatory_threshold"] = _to_decimal(
                "ADJUSTMENT_REASON_MANDATORY_THRESHOLD",
                mapping["ADJUSTMENT_REASON_MANDATORY_THRESHOLD"],
            )

        if "DISABLED_POLICIES" in mapping:
            kwargs["disabled_policies"] = frozenset(
                mapping["DISABLED_POLICIES"] or ()
            )

        if "DEFAULT_STRATEGY" in mapping:
            raw = mapping["DEFAULT_STRATEGY"]
            try:
                kwargs["default_strategy"] = (
                    raw if isinstance(raw, ExecutionStrategy)
                    else ExecutionStrategy(str(raw).upper())
                )
            except ValueError as exc:
                raise ImproperlyConfigured(
                    f"DEFAULT_STRATEGY must be one of "
                    f"{[s.value for s in ExecutionStrategy]}, got {raw!r}."
                ) from exc

        if "PARALLELIZE_SAME_ORDER_TIER" in mapping:
            kwargs["parallelize_same_order_tier"] = bool(
                mapping["PARALLELIZE_SAME_ORDER_TIER"]
            )

        if mapping.get("MAX_CONCURRENCY") is not None:
            kwargs["max_concurrency"] = _to_int(
                "MAX_CONCURRENCY", mapping["MAX_CONCURRENCY"]
            )

        return cls(**kwargs)

    @classmethod
    def from_django_settings(cls) -> "PolicyFrameworkSettings":
        """
        Read POLICY_FRAMEWORK from django.conf.settings.
        Defaults apply when Django settings are not configured.
        """
        from django.conf import ENVIRONMENT_VARIABLE, settings

        if not settings.configured and not os.environ.get(ENVIRONMENT_VARIABLE):
            return cls()
        return cls.from_mapping(getattr(settings, SETTINGS_KEY, None))

    # ══════════════════════════════════════════════════════════
    # DERIVED
    # ══════════════════════════════════════════════════════════

    def execution_options(self, **overrides) -> PolicyExecutionOptions:
        """Default per-call options for this host, with overrides."""
        kwargs: dict = {
            "strategy": self.default_strategy,
            "parallelize_same_order_tier": self.parallelize_same_order_tier,
        }
        if self.max_concurrency is not None:
            kwargs["max_concurrency"] = self.max_concurrency
        kwargs.update(overrides)
        return PolicyExecutionOptions(**kwargs)
