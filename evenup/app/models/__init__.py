"""
models — value objects for the ledger plus the one ORM table that stores them.

Entities are immutable and reference each other by plain string ids only
(paid_by, user_id, from_id, to_id, group_id). Ids are resolved at read time;
there are no object back-references between Group, Person and Expense.
"""

from evenup.app.models.activity import Activity, ActivityKind
from evenup.app.models.currency import CURRENCIES, CURRENCY_CODES, Currency
from evenup.app.models.expense import Category, Expense, ParticipantShare, SplitStrategy
from evenup.app.models.group import Group
from evenup.app.models.person import Person
from evenup.app.models.settlement import Settlement

__all__ = [
    "CURRENCIES",
    "CURRENCY_CODES",
    "Activity",
    "ActivityKind",
    "Category",
    "Currency",
    "Expense",
    "Group",
    "ParticipantShare",
    "Person",
    "Settlement",
    "SplitStrategy",
]
