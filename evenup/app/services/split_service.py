"""
services/split_service.py — Split calculator.

Runs once, at expense-creation time, and turns the total plus the form's
per-person inputs into absolute shares. The result is stored on the expense
and never recomputed.

  Strategy     input per person          resolved share
  ----------   -----------------------   ------------------------------
  equal        none                      amount / n
  percentage   percent (0-100)           amount * percent / 100
  exact        absolute amount           the input itself
  shares       weight (default 1)        amount * weight / sum(weights)

Per-person inputs are non-negative and no larger than MAX_AMOUNT; anything
else is read as 0, so the sum checks below decide whether the split stands.

Rejections (surfaced to the caller as a refused save, never silently
accepted):
  INVALID_AMOUNT         (400) amount <= 0 or amount > MAX_AMOUNT
  EMPTY_PARTICIPANTS     (400) no participants
  DUPLICATE_SPLIT_USER   (400) the same id twice
  SPLIT_PERCENT_MISMATCH (422) percents not within 0.01 of 100
  SPLIT_SUM_MISMATCH     (422) exact amounts not within 0.01 of the total
  INVALID_SHARE_WEIGHTS  (422) weights sum to zero or less

Rounding: equal, percentage and shares splits are resolved to cents with
ROUND_DOWN; the leftover cents go to the payer when the payer
participates, else to the first participant. Those lists therefore sum
exactly to `amount`; exact splits are stored as typed.

Layer rules:
  - No Flask imports. No storage access.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Mapping, Sequence

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.expense import MAX_AMOUNT, ParticipantShare, SplitStrategy

SPLIT_TOLERANCE = Decimal("0.01")

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


# ── Input parsing ──────────────────────────────────────────────────────────

def parse_split_input(raw: object, default: Decimal = _ZERO) -> Decimal:
    """
    Parses one raw form value into a Decimal.

    Missing or blank → `default`. Anything that does not parse, or parses to
    NaN/Infinity, a negative number or more than MAX_AMOUNT → 0. Never raises.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        return _ZERO
    text = str(raw).strip()
    if text == "":
        return default
    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError):
        return _ZERO
    if not value.is_finite() or value < 0 or value > MAX_AMOUNT:
        return _ZERO
    return value


def _default_for(strategy: SplitStrategy) -> Decimal:
    return _ONE if strategy == SplitStrategy.SHARES else _ZERO


def parse_split_inputs(
        participant_ids: Sequence[str],
        strategy: SplitStrategy,
        raw_inputs: Mapping[str, object] | None,
) -> dict[str, Decimal]:
    """Parsed value per participant, in participant order."""
    raw_inputs = raw_inputs or {}
    default = _default_for(strategy)
    return {
        pid: parse_split_input(raw_inputs.get(pid), default)
        for pid in participant_ids
    }


# ── Validation ─────────────────────────────────────────────────────────────

def _validate_request(amount: Decimal, participant_ids: Sequence[str]) -> None:
    if (
            not isinstance(amount, Decimal)
            or not amount.is_finite()
            or amount <= 0
            or amount > MAX_AMOUNT
    ):
        raise AppError(
            ErrorCode.INVALID_AMOUNT,
            f"Amount must be greater than zero and at most {MAX_AMOUNT}.",
            400,
            field="amount",
        )
    if not participant_ids:
        raise AppError(
            ErrorCode.EMPTY_PARTICIPANTS,
            "Select at least one person to split with.",
            400,
            field="participant_ids",
        )
    if len(set(participant_ids)) != len(participant_ids):
        raise AppError(
            ErrorCode.DUPLICATE_SPLIT_USER,
            "The same person appears more than once in the split.",
            400,
            field="participant_ids",
        )


def validate_split(
        amount: Decimal,
        strategy: SplitStrategy,
        values: Mapping[str, Decimal],
) -> None:
    """
    Checks the parsed per-person values against the strategy's rule.

    Raises AppError (422) with a message fit to show the user as-is.
    """
    total = sum(values.values(), _ZERO)

    if strategy == SplitStrategy.PERCENTAGE:
        if abs(total - _HUNDRED) > SPLIT_TOLERANCE:
            raise AppError(
                ErrorCode.SPLIT_PERCENT_MISMATCH,
                f"Percentages must add up to 100% (got {total}%).",
                422,
                field="inputs",
            )
    elif strategy == SplitStrategy.EXACT:
        if abs(total - amount) > SPLIT_TOLERANCE:
            raise AppError(
                ErrorCode.SPLIT_SUM_MISMATCH,
                f"Amounts must add up to {amount:.2f} (got {total:.2f}).",
                422,
                field="inputs",
            )
    elif strategy == SplitStrategy.SHARES:
        if total <= 0:
            raise AppError(
                ErrorCode.INVALID_SHARE_WEIGHTS,
                "Share weights must add up to more than zero.",
                422,
                field="inputs",
            )


# ── Resolution ─────────────────────────────────────────────────────────────

def _resolve_to_cents(
        amount: Decimal,
        raw_shares: Mapping[str, Decimal],
        payer_id: str | None,
) -> dict[str, Decimal]:
    """
    Rounds each share down to the cent and hands the leftover to the payer
    (or the first participant when the payer is not splitting).
    Guarantees sum(result) == amount.
    """
    shares = {
        pid: share.quantize(_CENT, rounding=ROUND_DOWN)
        for pid, share in raw_shares.items()
    }
    remainder = amount - sum(shares.values(), _ZERO)

    if remainder != 0:
        receiver = payer_id if payer_id in shares else next(iter(shares))
        shares[receiver] += remainder

    return shares


def compute_shares(
        amount: Decimal,
        participant_ids: Sequence[str],
        strategy: SplitStrategy,
        raw_inputs: Mapping[str, object] | None = None,
        payer_id: str | None = None,
) -> list[ParticipantShare]:
    """
    Resolves a split into absolute shares, one per participant, in the order
    given.

    Args:
        amount:          Expense total. Decimal, > 0.
        participant_ids: Non-empty, no duplicates.
        strategy:        One of SplitStrategy.
        raw_inputs:      {participant_id: raw text}. Ignored for EQUAL.
        payer_id:        Receives rounding leftovers when participating.

    Returns:
        [ParticipantShare(user_id, share)], summing to `amount` within
        SPLIT_TOLERANCE (exactly, for everything but EXACT).
    """
    _validate_request(amount, participant_ids)

    if strategy == SplitStrategy.EQUAL:
        count = Decimal(len(participant_ids))
        raw = {pid: amount / count for pid in participant_ids}
        resolved = _resolve_to_cents(amount, raw, payer_id)

    else:
        values = parse_split_inputs(participant_ids, strategy, raw_inputs)
        validate_split(amount, strategy, values)

        if strategy == SplitStrategy.PERCENTAGE:
            raw = {pid: amount * pct / _HUNDRED for pid, pct in values.items()}
            resolved = _resolve_to_cents(amount, raw, payer_id)
        elif strategy == SplitStrategy.EXACT:
            resolved = dict(values)
        else:
            total_weight = sum(values.values(), _ZERO)
            raw = {pid: amount * weight / total_weight for pid, weight in values.items()}
            resolved = _resolve_to_cents(amount, raw, payer_id)

    return [ParticipantShare(user_id=pid, share=resolved[pid]) for pid in participant_ids]
