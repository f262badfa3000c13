"""Condition values.

The lookup helpers never look inside a condition; they pass it straight to
``Collection.find`` or ``Result.where``. These types are what the bundled SQL
adapter understands.

    Cond({"id": 1})                 id = 1
    Cond({"id <=": 2})              id <= 2
    Cond(name="Linus Torvalds")     name = 'Linus Torvalds'
    Cond(id=[1, 3])                 id IN (1, 3)
    Or(Cond(id=1), Cond(id=3))      id = 1 OR id = 3
    Raw("born < :d", d=date)        literal SQL with bound parameters

Tags:
    recordkit, conditions, filters

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any


class Cond(dict):
    """Column conditions joined by AND.

    Keys are ``"column"`` or ``"column <op>"``.
    """

    def __repr__(self) -> str:
        return f"Cond({dict.__repr__(self)})"


class _Compound(tuple):
    def __new__(cls, *conditions: Any):
        return super().__new__(cls, conditions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(c) for c in self)})"


class And(_Compound):
    """All of the wrapped conditions."""


class Or(_Compound):
    """Any of the wrapped conditions."""


class Raw:
    """A literal SQL fragment with named bound parameters."""

    __slots__ = ("sql", "params")

    def __init__(self, sql: str, **params: Any) -> None:
        self.sql = sql
        self.params = params

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Raw) and (self.sql, self.params) == (other.sql, other.params)

    def __hash__(self) -> int:
        return hash(self.sql)

    def __repr__(self) -> str:
        return f"Raw({self.sql!r})"


__all__ = ["Cond", "And", "Or", "Raw"]
