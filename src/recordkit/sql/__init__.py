"""SQLAlchemy Core backed collections for recordkit.

Modules
-------
database    create_database_engine, Database, TableCollection
result      SQLResult (the Result protocol over a ``Select``)
compiler    condition, sort-key and projection translation

Tags:
    recordkit, sql, sqlalchemy

Doc-Types:
    package-overview, module-index
"""

from __future__ import annotations

from recordkit.sql.database import Database, TableCollection, create_database_engine
from recordkit.sql.result import SQLResult

__all__ = [
    "create_database_engine",
    "Database",
    "TableCollection",
    "SQLResult",
]
