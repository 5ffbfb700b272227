"""
services/balance_service.py — Pairwise balance computation.

This file is the SINGLE SOURCE OF TRUTH for how balances are computed.
The canonical formula must not be reimplemented elsewhere in the codebase;
screens, settle-up checks and summaries all go through compute_balances().

Sign convention (load-bearing for every consumer):
  balance[x] > 0  →  x owes the current user
  balance[x] < 0  →  the current user owes x

Layer rules:
  - compute_balances() and the presentation helpers are pure: no Flask, no
    storage, no module-level state. Same input, same output.
  - get_balance_overview() / get_balance_with() are the only functions here
    that read from the ledger store, and they only read.

Scope limitation, kept on purpose:
  An expense in which the current user is neither payer nor participant
  changes nothing here, even though the other members' mutual debts did
  change. A full multi-party ledger would need an all-pairs matrix rather
  than this single current-user-centric vector.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from evenup.app.errors import AppError, ErrorCode
from evenup.app.models.expense import Expense
from evenup.app.models.person import Person
from evenup.app.models.settlement import Settlement
from evenup.app.services.roster_service import unify_roster
from evenup.app.services.storage_service import LedgerStore

_ZERO = Decimal("0")


# ── Result types ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PersonBalance:
    person: Person
    balance: Decimal

    @property
    def is_owed_to_me(self) -> bool:
        return self.balance > 0

    @property
    def is_owed_by_me(self) -> bool:
        return self.balance < 0

    @property
    def is_settled(self) -> bool:
        return self.balance == 0


@dataclass(frozen=True)
class BalanceSummary:
    total_owed: Decimal   # sum of what others owe the current user
    total_owe: Decimal    # sum of what the current user owes others
    net: Decimal          # total_owed - total_owe
    open_count: int       # people with a non-zero balance


class BalanceFilter(str, enum.Enum):
    ALL     = "all"
    OWED    = "owed"      # they owe me
    OWE     = "owe"       # I owe them
    SETTLED = "settled"


class BalanceSort(str, enum.Enum):
    AMOUNT = "amount"
    NAME   = "name"


# ── Core algorithm ─────────────────────────────────────────────────────────

def compute_balances(
        expenses: Iterable[Expense],
        settlements: Iterable[Settlement],
        current_user_id: str,
        known_people: Iterable[Person],
) -> dict[str, Decimal]:
    """
    Canonical balance computation relative to `current_user_id`.

    Returns {person_id: net_balance} for every known person, plus any id
    that appears in activity with the current user but is missing from
    `known_people`.

    Algorithm:
      1. Start every known person at zero, so inactive people still appear.
      2. For each expense, each participant owes (share / total_shares) of
         the amount to the payer:
           - participant is the current user, payer is not →
             balance[payer] decreases (the current user owes the payer)
           - payer is the current user, participant is not →
             balance[participant] increases (they owe the current user)
           - otherwise the pairing is neutral.
         An expense whose shares total zero contributes nothing.
      3. A settlement pays down debt between its two parties:
           - from the current user → balance[to] increases (what the current
             user owed them shrinks)
           - to the current user   → balance[from] decreases (what they owed
             the current user shrinks)
         Overshoot is not clamped; it flips the sign.

    Never raises for well-typed input. Unknown ids are recorded under their
    own key rather than rejected; keeping the roster complete is the
    caller's job.
    """
    balances: dict[str, Decimal] = {person.id: _ZERO for person in known_people}

    # Step 2: expenses.
    for expense in expenses:
        total_shares = sum((p.share for p in expense.participants), _ZERO)
        if total_shares == 0:
            continue

        payer_is_me = expense.paid_by == current_user_id
        for participant in expense.participants:
            owed_amount = (participant.share / total_shares) * expense.amount
            participant_is_me = participant.user_id == current_user_id

            if participant_is_me and not payer_is_me:
                balances[expense.paid_by] = balances.get(expense.paid_by, _ZERO) - owed_amount
            elif not participant_is_me and payer_is_me:
                balances[participant.user_id] = (
                    balances.get(participant.user_id, _ZERO) + owed_amount
                )

    # Step 3: settlements.
    for settlement in settlements:
        if settlement.from_id == current_user_id:
            balances[settlement.to_id] = balances.get(settlement.to_id, _ZERO) + settlement.amount
        elif settlement.to_id == current_user_id:
            balances[settlement.from_id] = (
                balances.get(settlement.from_id, _ZERO) - settlement.amount
            )

    return balances


def get_total_balance(balances: Mapping[str, Decimal]) -> Decimal:
    """Net position of the current user across everyone (positive = owed overall)."""
    return sum(balances.values(), _ZERO)


# ── Presentation helpers ───────────────────────────────────────────────────

def people_with_balances(
        roster: Mapping[str, Person],
        balances: Mapping[str, Decimal],
) -> list[PersonBalance]:
    """Pairs each roster entry with its balance, in roster order. Missing → 0."""
    return [
        PersonBalance(person=person, balance=balances.get(person_id, _ZERO))
        for person_id, person in roster.items()
    ]


def summarize_balances(balances: Mapping[str, Decimal]) -> BalanceSummary:
    total_owed = sum((b for b in balances.values() if b > 0), _ZERO)
    total_owe = sum((-b for b in balances.values() if b < 0), _ZERO)
    return BalanceSummary(
        total_owed=total_owed,
        total_owe=total_owe,
        net=total_owed - total_owe,
        open_count=sum(1 for b in balances.values() if b != 0),
    )


def filter_people(
        people: Iterable[PersonBalance],
        balance_filter: BalanceFilter,
) -> list[PersonBalance]:
    if balance_filter == BalanceFilter.OWED:
        return [p for p in people if p.is_owed_to_me]
    if balance_filter == BalanceFilter.OWE:
        return [p for p in people if p.is_owed_by_me]
    if balance_filter == BalanceFilter.SETTLED:
        return [p for p in people if p.is_settled]
    return list(people)


def sort_people(
        people: Iterable[PersonBalance],
        sort_by: BalanceSort = BalanceSort.AMOUNT,
) -> list[PersonBalance]:
    """AMOUNT: largest absolute balance first. NAME: case-insensitive A→Z."""
    if sort_by == BalanceSort.NAME:
        return sorted(people, key=lambda p: p.person.name.casefold())
    return sorted(people, key=lambda p: abs(p.balance), reverse=True)


# ── Store-backed entry points ──────────────────────────────────────────────

def load_roster_and_balances(
        store: LedgerStore,
        current_user_id: str,
) -> tuple[dict[str, Person], dict[str, Decimal]]:
    """
    Reads every collection once and runs roster → aggregator.
    All intermediate state is local to this call.
    """
    roster = unify_roster(store.get_friends(), store.get_groups(), current_user_id)
    balances = compute_balances(
        store.get_expenses(),
        store.get_settlements(),
        current_user_id,
        roster.values(),
    )
    return roster, balances


def get_balance_overview(
        store: LedgerStore,
        current_user_id: str,
        balance_filter: BalanceFilter = BalanceFilter.ALL,
        sort_by: BalanceSort = BalanceSort.AMOUNT,
) -> tuple[list[PersonBalance], BalanceSummary]:
    """
    Balances for the people screen.

    The summary always covers the whole roster; the filter only narrows the
    returned list.
    """
    roster, balances = load_roster_and_balances(store, current_user_id)
    people = people_with_balances(roster, balances)
    summary = summarize_balances({p.person.id: p.balance for p in people})
    return sort_people(filter_people(people, balance_filter), sort_by), summary


def get_balance_with(
        store: LedgerStore,
        current_user_id: str,
        person_id: str,
) -> PersonBalance:
    """
    Balance between the current user and one roster member.

    Raises:
        AppError(PERSON_NOT_FOUND, 404) — person_id is not in the roster.
    """
    roster, balances = load_roster_and_balances(store, current_user_id)
    person = roster.get(person_id)
    if person is None:
        raise AppError(
            ErrorCode.PERSON_NOT_FOUND,
            f"Person {person_id} does not exist.",
            404,
        )
    return PersonBalance(person=person, balance=balances.get(person_id, _ZERO))
