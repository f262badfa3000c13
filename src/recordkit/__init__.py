"""
recordkit - lookup helpers over a generic collection abstraction.

Fetch one record by its identifier or by conditions, fetch many, check
existence, and shape a result set with composable modifiers, without
repeating the ``find``/``one``/``all``/``count`` boilerplate at every call
site.

Quick start:
    >>> from recordkit import Cond, Database, one, all_by, all_op, sort
    >>> db = Database.open("sqlite:///birthdays.db")
    >>>
    >>> @dataclass
    ... class Birthday:
    ...     id: int | None = None
    ...     name: str = ""
    ...     born: datetime | None = None
    ...
    ...     def collection(self):
    ...         return db.collection("birthdays")
    >>>
    >>> b = Birthday(id=1)
    >>> one(b)                                    # fills b.name, b.born
    >>> rows: list[Birthday] = []
    >>> all_by(Birthday(), rows, Cond({"id <=": 2}))
    >>> all_op(Birthday(), sort("-born"), rows)   # newest first

Modules:
    protocols   Persistent / Collection / Result / Modifier contracts
    identity    get_id: the record's ``id`` field
    lookup      one, one_by, all_by, all, exists, probe
    modifiers   limit, skip, sort, select, where, group, paginate, all_op, one_op
    conditions  Cond, And, Or, Raw
    sql         Database, TableCollection, SQLResult (SQLAlchemy Core)
    errors      RecordKitError hierarchy
    logging     structlog configuration
    settings    RECORDKIT_* settings

Tags:
    recordkit, repository, lookup, collection, package-overview
"""

from __future__ import annotations

from recordkit.conditions import And, Cond, Or, Raw
from recordkit.errors import (
    CollectionError,
    CollectionNotFound,
    ConfigError,
    IdentifierResolutionError,
    NoIdentifierField,
    NoMoreRows,
    NonIntegerIdentifier,
    QueryError,
    RecordKitError,
    SequenceExpected,
)
from recordkit.identity import get_id
from recordkit.lookup import Existence, all, all_by, exists, one, one_by, probe  # noqa: A004
from recordkit.modifiers import (
    all_op,
    group,
    limit,
    one_op,
    paginate,
    select,
    skip,
    sort,
    where,
)
from recordkit.protocols import Collection, Modifier, Persistent, Result
from recordkit.sql import Database, SQLResult, TableCollection, create_database_engine

__version__ = "0.1.0"

__all__ = [
    # protocols
    "Persistent",
    "Collection",
    "Result",
    "Modifier",
    # conditions
    "Cond",
    "And",
    "Or",
    "Raw",
    # identity / lookup
    "get_id",
    "one",
    "one_by",
    "all_by",
    "all",
    "exists",
    "probe",
    "Existence",
    # modifiers
    "limit",
    "skip",
    "sort",
    "select",
    "where",
    "group",
    "paginate",
    "all_op",
    "one_op",
    # sql
    "create_database_engine",
    "Database",
    "TableCollection",
    "SQLResult",
    # errors
    "RecordKitError",
    "IdentifierResolutionError",
    "NoIdentifierField",
    "NonIntegerIdentifier",
    "SequenceExpected",
    "CollectionError",
    "CollectionNotFound",
    "NoMoreRows",
    "QueryError",
    "ConfigError",
]
