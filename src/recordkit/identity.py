"""Identifier resolution.

:func:`get_id` finds the one field of a record named ``id`` (by attribute or
storage name, case-insensitively) and returns its integer value. It is the
only place recordkit looks inside a record to decide what to query for.

Examples:
    >>> @dataclass
    ... class Birthday:
    ...     ID: int = field(default=0, metadata={"column": "id"})
    ...     name: str = ""
    >>> get_id(Birthday(ID=3))
    3
    >>> b = Birthday(ID=3)
    >>> get_id(weakref.ref(b))  # reference layers are unwrapped
    3

Tags:
    recordkit, identifier, reflection

Doc-Types:
    api-reference
"""

from __future__ import annotations

import operator
from typing import Any

from recordkit.errors import NoIdentifierField, NonIntegerIdentifier
from recordkit.fields import RecordField, read_field, record_fields, unwrap

ID_FIELD = "id"


def id_field(record: Any) -> RecordField:
    """Return the single field of *record* that holds its identifier."""
    record = unwrap(record)
    matches = [
        f
        for f in record_fields(record)
        if f.attr.lower() == ID_FIELD or f.column.lower() == ID_FIELD
    ]
    if len(matches) != 1:
        found = ", ".join(f.attr for f in matches) or "none"
        raise NoIdentifierField(
            f"Expected exactly one {ID_FIELD!r} field on {type(record).__name__}, found {found}"
        ).with_context(record_type=type(record).__name__)
    return matches[0]


def get_id(record: Any) -> int:
    """Resolve the integer identifier of *record*.

    Raises:
        NoIdentifierField: zero or several fields are named ``id``.
        NonIntegerIdentifier: the field value is not an integer.
    """
    record = unwrap(record)
    f = id_field(record)
    value = read_field(record, f)
    try:
        if isinstance(value, bool):
            raise TypeError("bool is not an identifier")
        return operator.index(value)
    except TypeError as exc:
        raise NonIntegerIdentifier(
            f"{type(record).__name__}.{f.attr} is {value!r}, not an integer",
            cause=exc,
        ).with_context(record_type=type(record).__name__, column=f.column) from exc


__all__ = ["ID_FIELD", "id_field", "get_id"]
