"""
SQLAlchemy-backed collections.

:class:`Database` owns an engine and hands out :class:`TableCollection`
objects, one per reflected table. A table collection satisfies the
:class:`~recordkit.protocols.Collection` protocol, so a record type becomes
usable with the lookup helpers by returning one from ``collection()``.

Architecture:
    ::

        Database.open("sqlite:///birthdays.db")
            │
            ├── collection("birthdays") → TableCollection   (reflected, cached)
            │        │
            │        ├── find(*conds)   → SQLResult
            │        ├── append(item)   → primary key
            │        └── truncate()
            │
            └── close()                 → engine.dispose()

Examples:
    >>> db = Database.open("sqlite:///birthdays.db")
    >>> birthdays = db.collection("birthdays")
    >>>
    >>> @dataclass
    ... class Birthday:
    ...     id: int | None = None
    ...     name: str = ""
    ...     born: datetime | None = None
    ...
    ...     def collection(self):
    ...         return birthdays

Tags:
    recordkit, sql, sqlalchemy, engine, collection, reflection

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import MetaData, Table, create_engine, delete, event, insert, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.pool import StaticPool

from recordkit.errors import CollectionNotFound
from recordkit.fields import read_field, record_fields, unwrap
from recordkit.logging import get_logger
from recordkit.settings import RecordKitSettings, get_settings
from recordkit.sql.result import SQLResult

logger = get_logger(__name__)


def create_database_engine(url: str, *, echo: bool = False, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    SQLite URLs get ``foreign_keys`` enabled on every connection; in-memory
    SQLite databases share one connection so every cursor sees the same data.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, **kwargs)

    kwargs.setdefault("connect_args", {"check_same_thread": False})
    if url in ("sqlite://", "sqlite:///") or ":memory:" in url:
        kwargs.setdefault("poolclass", StaticPool)

    engine = create_engine(url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


class TableCollection:
    """One table, exposed through the ``Collection`` protocol."""

    def __init__(self, engine: Engine, table: Table) -> None:
        self._engine = engine
        self.table = table

    @property
    def name(self) -> str:
        return self.table.name

    def find(self, *conditions: Any) -> SQLResult:
        """Start a query; several conditions are a conjunction."""
        return SQLResult(self._engine, self.table, conditions)

    def append(self, item: Any) -> Any:
        """Insert *item* (a mapping or a record) and return its primary key.

        Primary-key columns holding ``None`` are left to the database.
        """
        item = unwrap(item)
        if isinstance(item, Mapping):
            data = dict(item)
        else:
            data = {f.column: read_field(item, f) for f in record_fields(item)}
        keys = {c.name for c in self.table.primary_key.columns}
        data = {
            k: v
            for k, v in data.items()
            if k in self.table.c and not (k in keys and v is None)
        }
        with self._engine.begin() as conn:
            pk = tuple(conn.execute(insert(self.table).values(**data)).inserted_primary_key)
        logger.debug("row_appended", collection=self.name, primary_key=pk)
        return pk[0] if len(pk) == 1 else pk

    def truncate(self) -> None:
        """Delete every row."""
        with self._engine.begin() as conn:
            conn.execute(delete(self.table))

    def __repr__(self) -> str:
        return f"TableCollection({self.name!r})"


class Database:
    """An engine plus a cache of reflected table collections."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._metadata = MetaData()
        self._collections: dict[str, TableCollection] = {}

    @classmethod
    def open(
        cls,
        url: str | None = None,
        *,
        echo: bool | None = None,
        settings: RecordKitSettings | None = None,
        **kwargs: Any,
    ) -> Database:
        """Open a database; missing arguments come from :func:`get_settings`."""
        if url is None or echo is None:
            settings = settings or get_settings()
            url = url or settings.database_url
            echo = settings.database_echo if echo is None else echo
        logger.debug("database_opened", url=url)
        return cls(create_database_engine(url, echo=echo, **kwargs))

    def collection(self, name: str) -> TableCollection:
        """Return the collection for table *name*.

        Raises:
            CollectionNotFound: the table does not exist.
        """
        if name not in self._collections:
            try:
                table = Table(name, self._metadata, autoload_with=self.engine)
            except NoSuchTableError as exc:
                raise CollectionNotFound(
                    f"Table {name!r} does not exist", cause=exc
                ).with_context(collection=name) from exc
            self._collections[name] = TableCollection(self.engine, table)
        return self._collections[name]

    def collections(self) -> list[str]:
        """Names of every table in the database."""
        return sorted(inspect(self.engine).get_table_names())

    def close(self) -> None:
        self._collections.clear()
        self.engine.dispose()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["create_database_engine", "TableCollection", "Database"]
