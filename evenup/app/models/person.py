"""
models/person.py — Person value object.

Identity is by `id` alone. Name, email and currency are display data: two
records with the same id are the same person for every balance computation,
whatever their names say.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    email: str
    currency: str | None = None

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Person id={self.id!r} name={self.name!r}>"
