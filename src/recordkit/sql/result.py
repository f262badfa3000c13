"""SQLAlchemy Core implementation of the :class:`~recordkit.protocols.Result` protocol.

``SQLResult`` only accumulates state; the ``Select`` is built when a
materializer runs, on a connection borrowed from the engine for that one
statement.

Tags:
    recordkit, sql, sqlalchemy, cursor, result

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Any

from sqlalchemy import Select, Table, func, select
from sqlalchemy.engine import Engine

from recordkit.errors import NoMoreRows, QueryError, SequenceExpected
from recordkit.fields import build, populate, unwrap
from recordkit.logging import get_logger
from recordkit.sql.compiler import compile_conditions, order_key, projection

logger = get_logger(__name__)


def _non_negative(name: str, n: int) -> int:
    if n < 0:
        raise QueryError(f"{name} must be non-negative, got {n}")
    return n


class SQLResult:
    """A pending ``SELECT`` against one table."""

    def __init__(self, engine: Engine, table: Table, conditions: tuple[Any, ...] = ()) -> None:
        self._engine = engine
        self._table = table
        self._filters = compile_conditions(table, conditions)
        self._limit: int | None = None
        self._offset: int | None = None
        self._order: list[Any] = []
        self._columns: list[Any] = []
        self._group: list[Any] = []

    # --- mutators ---

    def limit(self, n: int) -> SQLResult:
        self._limit = _non_negative("limit", n)
        return self

    def skip(self, n: int) -> SQLResult:
        self._offset = _non_negative("skip", n)
        return self

    def sort(self, *fields: Any) -> SQLResult:
        self._order = [order_key(self._table, f) for f in fields]
        return self

    def select(self, *fields: Any) -> SQLResult:
        self._columns = [projection(self._table, f) for f in fields]
        return self

    def where(self, *conditions: Any) -> SQLResult:
        self._filters = compile_conditions(self._table, conditions)
        return self

    def group(self, *fields: Any) -> SQLResult:
        self._group = [projection(self._table, f) for f in fields]
        return self

    # --- statement ---

    @property
    def statement(self) -> Select:
        """The ``Select`` the current state compiles to."""
        if self._columns:
            stmt = select(*self._columns).select_from(self._table)
        else:
            stmt = select(self._table)
        if self._filters:
            stmt = stmt.where(*self._filters)
        if self._group:
            stmt = stmt.group_by(*self._group)
        if self._order:
            stmt = stmt.order_by(*self._order)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset:
            stmt = stmt.offset(self._offset)
        return stmt

    # --- materializers ---

    def one(self, target: Any) -> None:
        """Populate *target* with the first matching row.

        Raises:
            NoMoreRows: nothing matched.
        """
        stmt = self.statement
        if self._limit is None or self._limit > 1:
            stmt = stmt.limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NoMoreRows(
                f"No rows in {self._table.name!r} match the query"
            ).with_context(collection=self._table.name)
        populate(unwrap(target), dict(row))

    def all(self, rows: MutableSequence[Any], model: type | None = None) -> None:
        """Replace the contents of *rows* with every matching row, built as *model*."""
        if not isinstance(rows, MutableSequence):
            raise SequenceExpected(
                f"Expected a mutable sequence, got {type(rows).__name__}"
            ).with_context(collection=self._table.name)
        with self._engine.connect() as conn:
            mappings = conn.execute(self.statement).mappings().all()
        records = [build(model, dict(m)) for m in mappings]
        rows.clear()
        rows.extend(records)
        logger.debug("rows_materialized", collection=self._table.name, count=len(records))

    def count(self) -> int:
        """Rows matching the current filter, ignoring limit, skip and sort."""
        stmt = select(func.count()).select_from(self._table)
        if self._filters:
            stmt = stmt.where(*self._filters)
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one())

    def __repr__(self) -> str:
        return f"SQLResult({self._table.name!r})"


__all__ = ["SQLResult"]
