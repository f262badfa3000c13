"""
Canonical protocol definitions for recordkit.

Every seam between the lookup helpers and the data-access layer is a
structural protocol. A record type qualifies for ``one``/``all_by``/``exists``
by exposing a single ``collection()`` method, whatever its own class
hierarchy looks like.

Manifesto:
    Protocols define contracts without inheritance. They enable:
    - **Decoupling:** Lookup helpers depend on shape, not implementation
    - **Testability:** Any object matching the protocol works (including mocks)
    - **Portability:** The bundled SQL adapter is one implementation, not the
      only one

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── Persistent  record capability: collection() -> Collection
        ├── Collection  find(*conditions) -> Result
        ├── Result      mutators + materializers of a pending query
        └── Modifier    Callable[[Result], None]

    Implementations:
        recordkit.sql.TableCollection, recordkit.sql.SQLResult

Guardrails:
    ❌ DON'T: Make records inherit from a base class to be usable
    ✅ DO: Give them a collection() method

    ❌ DON'T: Return a new cursor from a modifier
    ✅ DO: Mutate the cursor you were handed; the return value is ignored

Tags:
    protocol, collection, cursor, record, recordkit, contracts

Doc-Types:
    - API Reference
    - Architecture Decision Record
"""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Result(Protocol):
    """
    A pending, stateful query against one collection.

    Mutators narrow or reshape the query; materializers execute it. A result
    is obtained from :meth:`Collection.find`, handed to at most one modifier
    and materialized once.

    Architecture:
        ::

            Result Protocol:
            ┌────────────────────────────────────────────────────────┐
            │ limit(n)               → cap the number of rows        │
            │ skip(n)                → discard the first n rows      │
            │ sort(*fields)          → order; "-field" = descending  │
            │ select(*fields)        → restrict returned columns     │
            │ where(*conditions)     → REPLACE the filter            │
            │ group(*fields)         → group by columns              │
            ├────────────────────────────────────────────────────────┤
            │ one(target)            → populate target in place      │
            │ all(rows, model=None)  → fill rows with records        │
            │ count()                → number of matching rows       │
            └────────────────────────────────────────────────────────┘
    """

    def limit(self, n: int) -> Any:
        """Cap the number of returned rows."""
        ...

    def skip(self, n: int) -> Any:
        """Discard the first *n* rows."""
        ...

    def sort(self, *fields: Any) -> Any:
        """Order rows; a leading ``-`` on a field name means descending."""
        ...

    def select(self, *fields: Any) -> Any:
        """Restrict the returned columns."""
        ...

    def where(self, *conditions: Any) -> Any:
        """Discard the current filter and use *conditions* instead."""
        ...

    def group(self, *fields: Any) -> Any:
        """Group rows sharing the same values in *fields*."""
        ...

    def one(self, target: Any) -> None:
        """Populate *target* with the first matching row."""
        ...

    def all(self, rows: MutableSequence[Any], model: type | None = None) -> None:
        """Replace the contents of *rows* with every matching row."""
        ...

    def count(self) -> int:
        """Number of rows matching the current filter."""
        ...


@runtime_checkable
class Collection(Protocol):
    """A queryable set of records of one kind."""

    def find(self, *conditions: Any) -> Result:
        """Start a query; several conditions are a conjunction."""
        ...


@runtime_checkable
class Persistent(Protocol):
    """
    The one capability a record needs to be usable with recordkit.

    Examples:
        >>> @dataclass
        ... class Birthday:
        ...     id: int = 0
        ...     name: str = ""
        ...
        ...     def collection(self) -> Collection:
        ...         return db.collection("birthdays")
        >>> isinstance(Birthday(), Persistent)
        True
    """

    def collection(self) -> Collection:
        """Return the collection this record is stored in."""
        ...


Modifier = Callable[[Result], None]
"""A function that mutates a pending :class:`Result` before it is materialized."""


__all__ = [
    "Result",
    "Collection",
    "Persistent",
    "Modifier",
]
