"""
Lookup helpers - fetch one record, fetch many, check existence.

Each helper is a few lines over the record's collection: build a condition,
``find``, then ``one``/``all``/``count``. Conditions are forwarded verbatim
and collection errors reach the caller untouched, except in the existence
checks, which never raise.

Architecture:
    ::

        one(record)                  find(Cond(id=get_id(record))).one(record)
        one_by(record, *conds)       find(*conds).one(record)
        all_by(record, rows, *conds) find(*conds).all(rows, type(record))
        all(...)                     alias of all_by
        probe(record, *conds)        find(conds or Cond(id=...)).count()
                                     → EXISTS | MISSING | UNKNOWN
        exists(record, *conds)       probe(...) is EXISTS

Examples:
    >>> b = Birthday(id=1)
    >>> one(b)
    >>> b.name
    'Jonathan Ive'

    >>> rows: list[Birthday] = []
    >>> all_by(Birthday(), rows, Cond({"id <=": 2}))
    >>> [r.id for r in rows]
    [1, 2]

    >>> exists(Birthday(id=99))
    False

Guardrails:
    ❌ DON'T: Expect exists() to surface database failures
    ✅ DO: Use probe() when "could not tell" must differ from "absent"

Tags:
    recordkit, lookup, fetch, exists, repository

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import MutableSequence
from enum import Enum
from typing import Any

from recordkit.conditions import Cond
from recordkit.fields import unwrap
from recordkit.identity import ID_FIELD, get_id
from recordkit.logging import get_logger
from recordkit.protocols import Persistent

logger = get_logger(__name__)


class Existence(str, Enum):
    """Outcome of :func:`probe`."""

    EXISTS = "exists"
    MISSING = "missing"
    UNKNOWN = "unknown"


def one(record: Persistent) -> None:
    """Fill *record* in place with the stored row sharing its identifier.

    Raises:
        IdentifierResolutionError: the record has no usable ``id`` field.
        Any error the collection raises (e.g. ``NoMoreRows``).
    """
    record = unwrap(record)
    record_id = get_id(record)
    logger.debug("fetch_one", record_type=type(record).__name__, id=record_id)
    record.collection().find(Cond({ID_FIELD: record_id})).one(record)


def one_by(record: Persistent, *conditions: Any) -> None:
    """Fill *record* in place with the first row matching *conditions*."""
    record = unwrap(record)
    logger.debug("fetch_one_by", record_type=type(record).__name__, conditions=conditions)
    record.collection().find(*conditions).one(record)


def all_by(
    record: Persistent,
    rows: MutableSequence[Any],
    *conditions: Any,
    model: type | None = None,
) -> None:
    """Replace the contents of *rows* with every row matching *conditions*.

    *record* only supplies the collection. Rows are built as ``model``,
    defaulting to the record's own type.
    """
    record = unwrap(record)
    logger.debug("fetch_all_by", record_type=type(record).__name__, conditions=conditions)
    record.collection().find(*conditions).all(rows, model or type(record))


def all(  # noqa: A001
    record: Persistent,
    rows: MutableSequence[Any],
    *conditions: Any,
    model: type | None = None,
) -> None:
    """Alias of :func:`all_by`."""
    all_by(record, rows, *conditions, model=model)


def probe(record: Persistent, *conditions: Any) -> Existence:
    """Check whether a row matches the record's identifier or *conditions*.

    Without conditions the record's identifier is used; when it cannot be
    resolved the zero identifier is used instead. Collection failures are
    reported as :attr:`Existence.UNKNOWN`, never raised.
    """
    if not conditions:
        try:
            record_id = get_id(record)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "probe_without_identifier",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            record_id = 0
        conditions = (Cond({ID_FIELD: record_id}),)

    try:
        record = unwrap(record)
        count = record.collection().find(*conditions).count()
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "probe_failed",
            record_type=type(record).__name__,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return Existence.UNKNOWN
    return Existence.EXISTS if count > 0 else Existence.MISSING


def exists(record: Persistent, *conditions: Any) -> bool:
    """True iff at least one row matches; never raises."""
    return probe(record, *conditions) is Existence.EXISTS


__all__ = [
    "Existence",
    "one",
    "one_by",
    "all_by",
    "all",
    "probe",
    "exists",
]
