"""
BOS Posting Engine — Policies
===============================
Validation policies for general-ledger posting.

Order   Policy                                  Severity
  1     Posting.BalancedEntry                   ERROR
  2     Posting.OpenFiscalPeriod                ERROR / WARNING
  5     Posting.FutureDatePosting               ERROR
 10     Posting.IntercompanyPartnerValidation   ERROR
"""

from __future__ import annotations

from datetime import timedelta, timezone
from decimal import Decimal
from typing import Optional

from core.policy import BasePolicy, PolicyOrdering, PolicyResult
from core.time import Clock, today_utc
from engines.posting.context import FiscalPeriodStatus, PostingContext


class PostingErrorCodes:
    UNBALANCED_ENTRY = "PST-001"
    FISCAL_PERIOD_CLOSED_OR_LOCKED = "PST-002"
    INTERCOMPANY_PARTNER_MISSING = "PST-003"
    INVALID_INTERCOMPANY_PARTNER = "PST-004"
    FUTURE_POSTING_HORIZON_EXCEEDED = "PST-005"
    FISCAL_PERIOD_CLOSING = "PST-W001"


class BalancedEntryPolicy(BasePolicy):
    """
    Double-entry invariant: debits equal credits within a rounding
    tolerance of 0.01.
    """

    BALANCE_TOLERANCE = Decimal("0.01")

    policy_name = "Posting.BalancedEntry"
    order = PolicyOrdering.HARD_GATE_MIN

    def evaluate(self, context: PostingContext) -> PolicyResult:
        imbalance = context.imbalance
        if imbalance > self.BALANCE_TOLERANCE:
            currency = context.currency
            return self.fail(
                code=PostingErrorCodes.UNBALANCED_ENTRY,
                message=(
                    f"Document '{context.document_number}' is not balanced. "
                    f"Debit={context.total_debit:,.2f} {currency}, "
                    f"Credit={context.total_credit:,.2f} {currency}, "
                    f"Imbalance={imbalance:,.4f} {currency} "
                    f"(tolerance: {self.BALANCE_TOLERANCE:,.2f})."
                ),
                metadata={
                    "total_debit": context.total_debit,
                    "total_credit": context.total_credit,
                    "imbalance": imbalance,
                    "tolerance": self.BALANCE_TOLERANCE,
                    "currency": currency,
                },
            )
        return self.pass_policy()


class OpenFiscalPeriodPolicy(BasePolicy):
    """Postings only into OPEN periods; CLOSING is allowed with a warning."""

    policy_name = "Posting.OpenFiscalPeriod"
    order = PolicyOrdering.HARD_GATE_MIN + 1

    async def evaluate(self, context: PostingContext) -> PolicyResult:
        status = await context.period_status()
        period = f"{context.fiscal_period}/{context.fiscal_year}"

        if status is FiscalPeriodStatus.LOCKED:
            return self.fail(
                code=PostingErrorCodes.FISCAL_PERIOD_CLOSED_OR_LOCKED,
                message=(
                    f"Fiscal period {period} is LOCKED. No postings are "
                    f"permitted. Contact the finance administration team "
                    f"to unlock."
                ),
                field="posting_date",
            )

        if status is FiscalPeriodStatus.CLOSED:
            return self.fail(
                code=PostingErrorCodes.FISCAL_PERIOD_CLOSED_OR_LOCKED,
                message=(
                    f"Fiscal period {period} is CLOSED. Post to the current "
                    f"open period or request a period re-opening from "
                    f"finance administration."
                ),
                field="posting_date",
            )

        if status is FiscalPeriodStatus.CLOSING:
            return self.warn(
                code=PostingErrorCodes.FISCAL_PERIOD_CLOSING,
                message=(
                    f"Fiscal period {period} is in CLOSING status. Month-end "
                    f"procedures may be in progress. Confirm with the "
                    f"financial controller before proceeding."
                ),
                field="posting_date",
            )

        return self.pass_policy()


class FutureDatePostingPolicy(BasePolicy):
    """
    Posting date may lie at most max_future_days after today (UTC).
    Compared by calendar day. Today comes from the injected clock.
    """

    policy_name = "Posting.FutureDatePosting"
    order = PolicyOrdering.HARD_GATE_MIN + 4

    def __init__(self, max_future_days: int = 60, clock: Optional[Clock] = None):
        if max_future_days < 0:
            raise ValueError("max_future_days must be non-negative.")
        self._max_future_days = max_future_days
        self._clock = clock

    @property
    def max_future_days(self) -> int:
        return self._max_future_days

    def evaluate(self, context: PostingContext) -> PolicyResult:
        max_allowed = today_utc(self._clock) + timedelta(days=self._max_future_days)

        posting_date = context.posting_date
        if posting_date.tzinfo is not None:
            posting_date = posting_date.astimezone(timezone.utc)
        posting_day = posting_date.date()

        if posting_day > max_allowed:
            return self.fail(
                code=PostingErrorCodes.FUTURE_POSTING_HORIZON_EXCEEDED,
                message=(
                    f"Posting date {posting_day.isoformat()} exceeds the "
                    f"maximum allowed future posting horizon of "
                    f"{self._max_future_days} days (max allowed: "
                    f"{max_allowed.isoformat()}). Correct the posting date "
                    f"or contact your ERP administrator."
                ),
                field="posting_date",
                metadata={
                    "posting_date": posting_day,
                    "max_allowed_date": max_allowed,
                    "max_future_days": self._max_future_days,
                },
            )
        return self.pass_policy()


class IntercompanyPartnerValidationPolicy(BasePolicy):
    """Intercompany documents need a partner that is not the posting company."""

    policy_name = "Posting.IntercompanyPartnerValidation"
    order = PolicyOrdering.BUSINESS_RULE_MIN

    def evaluate(self, context: PostingContext) -> PolicyResult:
        if not context.is_intercompany:
            return self.pass_policy()

        partner = (context.intercompany_partner_code or "").strip()
        if not partner:
            return self.fail(
                code=PostingErrorCodes.INTERCOMPANY_PARTNER_MISSING,
                message=(
                    f"Document '{context.document_number}' is flagged as "
                    f"intercompany but no partner company code was provided. "
                    f"Specify the intercompany partner before posting."
                ),
                field="intercompany_partner_code",
            )

        if partner.casefold() == context.company_code.strip().casefold():
            return self.fail(
                code=PostingErrorCodes.INVALID_INTERCOMPANY_PARTNER,
                message=(
                    f"Intercompany partner code "
                    f"'{context.intercompany_partner_code}' cannot equal the "
                    f"posting company code '{context.company_code}'. "
                    f"A company cannot be its own intercompany partner."
                ),
                field="intercompany_partner_code",
            )
        return self.pass_policy()


__all__ = [
    "PostingErrorCodes",
    "BalancedEntryPolicy",
    "OpenFiscalPeriodPolicy",
    "FutureDatePostingPolicy",
    "IntercompanyPartnerValidationPolicy",
]
