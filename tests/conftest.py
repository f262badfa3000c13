"""
Shared pytest fixtures and configuration for recordkit tests.

This module provides:
- A seeded SQLite database (``birthdays`` table, three rows) under tmp_path
- Binding of the record types in ``tests._support.records`` to that database
- Settings-cache isolation

Usage:
    def test_something(birthdays):
        b = Birthday(id=1)
        one(b)
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy import MetaData

# Ensure recordkit and tests._support are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from recordkit import Database, TableCollection
from recordkit.settings import clear_settings_cache
from tests._support.records import BIRTHDAYS, bind, birthdays_table


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests: anything touching the database fixture is integration."""
    for item in items:
        if "database" in getattr(item, "fixturenames", ()):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Generator[Database, None, None]:
    """SQLite database file with a seeded ``birthdays`` table."""
    db = Database.open(f"sqlite:///{tmp_path / 'example.db'}", echo=False)
    metadata = MetaData()
    birthdays_table(metadata)
    metadata.create_all(db.engine)

    collection = db.collection("birthdays")
    for row in BIRTHDAYS:
        collection.append(row)

    yield db
    db.close()


@pytest.fixture
def birthdays(database: Database) -> Generator[TableCollection, None, None]:
    """The ``birthdays`` collection, bound to every test record type."""
    collection = database.collection("birthdays")
    bind(collection)
    yield collection
    bind(None)
