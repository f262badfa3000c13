"""Translate recordkit conditions, sort keys and projections into SQLAlchemy.

Tags:
    recordkit, sql, sqlalchemy, conditions, compiler

Doc-Types:
    api-reference
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sqlalchemy import Column, Table, and_, literal_column, or_, text, true
from sqlalchemy.sql.elements import ClauseElement, ColumnElement

from recordkit.conditions import And, Or, Raw
from recordkit.errors import QueryError

_SEQUENCE_TYPES = (list, tuple, set, frozenset)

_OPERATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "like": lambda col, value: col.like(value),
    "not like": lambda col, value: col.not_like(value),
    "in": lambda col, value: col.in_(list(value)),
    "not in": lambda col, value: col.not_in(list(value)),
    "is": lambda col, value: col.is_(value),
    "is not": lambda col, value: col.is_not(value),
}


def column(table: Table, name: str) -> Column:
    try:
        return table.c[name]
    except KeyError as exc:
        raise QueryError(
            f"Unknown column {name!r} in {table.name!r}", cause=exc
        ).with_context(collection=table.name, column=name) from exc


def split_key(key: str) -> tuple[str, str | None]:
    """``"id <="`` → ``("id", "<=")``; ``"name"`` → ``("name", None)``."""
    parts = key.strip().split(None, 1)
    if not parts:
        raise QueryError("Empty condition key")
    if len(parts) == 1:
        return parts[0], None
    return parts[0], " ".join(parts[1].lower().split())


def _compile_pair(table: Table, key: str, value: Any) -> ColumnElement[bool]:
    name, op = split_key(key)
    col = column(table, name)
    if op is None:
        if isinstance(value, _SEQUENCE_TYPES):
            return col.in_(list(value))
        if value is None:
            return col.is_(None)
        return col == value
    try:
        return _OPERATORS[op](col, value)
    except KeyError as exc:
        raise QueryError(
            f"Unsupported operator {op!r} in condition {key!r}", cause=exc
        ).with_context(collection=table.name, column=name) from exc


def compile_condition(table: Table, condition: Any) -> ColumnElement[bool]:
    if isinstance(condition, Raw):
        return text(condition.sql).bindparams(**condition.params)
    if isinstance(condition, Or):
        return or_(*(compile_condition(table, c) for c in condition))
    if isinstance(condition, And):
        return and_(true(), *(compile_condition(table, c) for c in condition))
    if isinstance(condition, Mapping):
        clauses = [_compile_pair(table, str(k), v) for k, v in condition.items()]
        return and_(true(), *clauses)
    if isinstance(condition, ClauseElement):
        return condition
    raise QueryError(
        f"Unsupported condition type {type(condition).__name__}"
    ).with_context(collection=table.name)


def compile_conditions(table: Table, conditions: Iterable[Any]) -> list[ColumnElement[bool]]:
    return [compile_condition(table, c) for c in conditions]


def _raw_column(raw: Raw) -> ColumnElement[Any]:
    if raw.params:
        raise QueryError("Raw projections and sort keys cannot take parameters")
    return literal_column(raw.sql)


def order_key(table: Table, field: Any) -> ColumnElement[Any]:
    """``"-born"`` sorts descending, ``"born"`` or ``"+born"`` ascending."""
    if isinstance(field, Raw):
        return _raw_column(field)
    if isinstance(field, ClauseElement):
        return field
    name = str(field).strip()
    if name.startswith("-"):
        return column(table, name[1:]).desc()
    return column(table, name.lstrip("+")).asc()


def projection(table: Table, field: Any) -> ColumnElement[Any]:
    if isinstance(field, Raw):
        return _raw_column(field)
    if isinstance(field, ClauseElement):
        return field
    return column(table, str(field))


__all__ = [
    "column",
    "split_key",
    "compile_condition",
    "compile_conditions",
    "order_key",
    "projection",
]
