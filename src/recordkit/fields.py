"""Field discovery and population for caller-owned records.

Records are plain caller types: dataclasses, pydantic models, SQLAlchemy
mapped classes, mutable mappings or ordinary objects. This module knows how
to list their fields (attribute name plus storage name), how to fill an
existing record from a row mapping and how to build a fresh one.

Storage names:
    * dataclass   → ``field(metadata={"column": "..."})``, else the field name.
      A column of ``"-"`` hides the field from storage.
    * pydantic    → the field alias, else the field name.
    * SQLAlchemy  → the mapped column name.
    * mapping     → the keys.
    * other       → public slots and instance attributes.

Tags:
    recordkit, reflection, fields, records

Doc-Types:
    api-reference
"""

from __future__ import annotations

import dataclasses
import inspect
import weakref
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect as sa_inspect

from recordkit.errors import IdentifierResolutionError

HIDDEN_COLUMN = "-"


@dataclass(frozen=True, slots=True)
class RecordField:
    """One field of a record: Python attribute and storage column."""

    attr: str
    column: str


def unwrap(obj: Any) -> Any:
    """Strip reference layers (weak references, ``__wrapped__`` proxies)."""
    seen: set[int] = set()
    while True:
        if id(obj) in seen:
            raise IdentifierResolutionError(
                f"Reference cycle while unwrapping {type(obj).__name__}"
            )
        seen.add(id(obj))
        if isinstance(obj, weakref.ReferenceType):
            target = obj()
            if target is None:
                raise IdentifierResolutionError("Weak reference to a collected record")
            obj = target
            continue
        wrapped = getattr(obj, "__wrapped__", None)
        if wrapped is None or isinstance(obj, type):
            return obj
        obj = wrapped


def _mapper(cls: type) -> Any:
    mapper = sa_inspect(cls, raiseerr=False)
    return mapper if mapper is not None and hasattr(mapper, "column_attrs") else None


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = getattr(klass, "__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return names


def record_fields(record: Any) -> list[RecordField]:
    """List the storage-visible fields of *record* (an instance or a class)."""
    cls = record if isinstance(record, type) else type(record)

    if isinstance(record, Mapping):
        return [RecordField(str(key), str(key)) for key in record]

    if dataclasses.is_dataclass(cls):
        result = []
        for f in dataclasses.fields(cls):
            column = f.metadata.get("column", f.name)
            if column != HIDDEN_COLUMN:
                result.append(RecordField(f.name, column))
        return result

    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, dict):
        return [
            RecordField(name, info.alias or name) for name, info in model_fields.items()
        ]

    mapper = _mapper(cls)
    if mapper is not None:
        return [RecordField(attr.key, attr.columns[0].name) for attr in mapper.column_attrs]

    names = _slot_names(cls)
    if not isinstance(record, type) and hasattr(record, "__dict__"):
        names += [name for name in vars(record) if name not in names]
    return [RecordField(name, name) for name in names if not name.startswith("_")]


def read_field(record: Any, f: RecordField) -> Any:
    if isinstance(record, Mapping):
        return record[f.attr]
    # unset slots read as None
    return getattr(record, f.attr, None)


def populate(target: Any, row: Mapping[str, Any]) -> Any:
    """Copy the values of *row* onto *target* in place and return it.

    Mappings are updated with every key. Other records receive only the
    columns they declare; a record without declared fields takes them all.
    """
    if isinstance(target, MutableMapping):
        target.update(row)
        return target

    declared = record_fields(type(target))
    if not declared and not dataclasses.is_dataclass(target):
        for key, value in row.items():
            setattr(target, key, value)
        return target

    for f in declared:
        if f.column in row:
            setattr(target, f.attr, row[f.column])
    return target


def build(model: type | None, row: Mapping[str, Any]) -> Any:
    """Create a new record of type *model* from *row*.

    ``None`` or a mapping type yields a mapping. Dataclass fields absent from
    the row fall back to their defaults, or ``None``.
    """
    if model is None or issubclass(model, Mapping):
        return dict(row) if model is None else model(row)

    if dataclasses.is_dataclass(model):
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(model):
            if not f.init:
                continue
            column = f.metadata.get("column", f.name)
            if column in row:
                kwargs[f.name] = row[column]
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                kwargs[f.name] = None
        return model(**kwargs)

    if hasattr(model, "model_validate"):
        return model.model_validate(dict(row))

    try:
        inspect.signature(model).bind()
    except (TypeError, ValueError):
        # constructor needs arguments the row may not supply
        return populate(model.__new__(model), row)
    return populate(model(), row)


__all__ = [
    "RecordField",
    "unwrap",
    "record_fields",
    "read_field",
    "populate",
    "build",
]
