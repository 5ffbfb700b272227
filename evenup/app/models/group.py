"""
models/group.py — Group value object.

A group is a named, insertion-ordered set of people. It holds no financial
state of its own: a group's spend is derived by filtering expenses on
`group_id`, never stored on the group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from evenup.app.models.person import Person


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    created_at: datetime
    members: tuple[Person, ...] = field(default_factory=tuple)
    icon: str | None = None

    @property
    def member_ids(self) -> list[str]:
        return [m.id for m in self.members]

    def without_member(self, person_id: str) -> "Group":
        """Returns a copy of this group with `person_id` removed from members."""
        return Group(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            members=tuple(m for m in self.members if m.id != person_id),
            icon=self.icon,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Group id={self.id!r} name={self.name!r} members={len(self.members)}>"
