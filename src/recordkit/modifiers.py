"""
Result-set modifiers and the apply-then-fetch entry points.

A modifier is any ``Callable[[Result], None]``. The factories below each wrap
exactly one cursor mutator; :func:`all_op` and :func:`one_op` accept them or
any other function with the same shape, so callers can reach cursor features
recordkit does not wrap.

Architecture:
    ::

        all_op(record, operation, rows, *conds)
            result = record.collection().find(*conds)   # initial filter
            operation(result)                           # may replace it (where)
            result.all(rows, model or type(record))     # materialize

        one_op(record, operation, row, *conds)
            ... same, then result.one(row)

Examples:
    >>> rows: list[Birthday] = []
    >>> all_op(Birthday(), sort("-born"), rows)
    >>> all_op(Birthday(), paginate(1, 1), rows)

    Custom modifiers compose mutators freely:

    >>> def newest_two(result):
    ...     result.sort("-born")
    ...     result.limit(2)
    >>> all_op(Birthday(), newest_two, rows)

Tags:
    recordkit, modifiers, cursor, pagination, sort

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Any

from recordkit.fields import unwrap
from recordkit.logging import get_logger
from recordkit.protocols import Modifier, Persistent, Result

logger = get_logger(__name__)


def limit(n: int) -> Modifier:
    """Cap the number of results at *n*."""

    def _limit(result: Result) -> None:
        result.limit(n)

    return _limit


def skip(n: int) -> Modifier:
    """Ignore the first *n* results."""

    def _skip(result: Result) -> None:
        result.skip(n)

    return _skip


def sort(*fields: Any) -> Modifier:
    """Order results by *fields*.

    Field names prefixed with a minus sign (``-born``) sort descending;
    ascending is the default.
    """

    def _sort(result: Result) -> None:
        result.sort(*fields)

    return _sort


def select(*fields: Any) -> Modifier:
    """Restrict the fields filled in on each result."""

    def _select(result: Result) -> None:
        result.select(*fields)

    return _select


def where(*conditions: Any) -> Modifier:
    """Discard the initial filtering conditions and use *conditions* instead."""

    def _where(result: Result) -> None:
        result.where(*conditions)

    return _where


def group(*fields: Any) -> Modifier:
    """Group results sharing the same values in *fields*."""

    def _group(result: Result) -> None:
        result.group(*fields)

    return _group


def paginate(limit: int, skip: int) -> Modifier:
    """Apply a limit and a skip in one modifier."""

    def _paginate(result: Result) -> None:
        result.limit(limit)
        result.skip(skip)

    return _paginate


def all_op(
    record: Persistent,
    operation: Modifier,
    rows: MutableSequence[Any],
    *conditions: Any,
    model: type | None = None,
) -> None:
    """Like :func:`recordkit.lookup.all_by`, with *operation* applied to the result set first."""
    record = unwrap(record)
    result = record.collection().find(*conditions)
    operation(result)
    logger.debug(
        "fetch_all_op",
        record_type=type(record).__name__,
        operation=getattr(operation, "__name__", repr(operation)),
    )
    result.all(rows, model or type(record))


def one_op(
    record: Persistent,
    operation: Modifier,
    row: Any,
    *conditions: Any,
) -> None:
    """Like :func:`all_op`, but fills the single *row* in place."""
    record = unwrap(record)
    result = record.collection().find(*conditions)
    operation(result)
    logger.debug(
        "fetch_one_op",
        record_type=type(record).__name__,
        operation=getattr(operation, "__name__", repr(operation)),
    )
    result.one(row)


__all__ = [
    "limit",
    "skip",
    "sort",
    "select",
    "where",
    "group",
    "paginate",
    "all_op",
    "one_op",
]
