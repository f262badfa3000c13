"""
Structured error types for recordkit.

Every error raised by recordkit itself extends :class:`RecordKitError` and
carries a category, structured context and an optional chained cause. Errors
raised by SQLAlchemy or the database driver are NOT wrapped: the lookup layer
lets them reach the caller untouched.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                      RecordKitError                          │
        │            (category, context, cause)                        │
        ├──────────────────────────────────────────────────────────────┤
        │                                                              │
        │  IdentifierResolutionError     SequenceExpected              │
        │  (VALIDATION)                  (VALIDATION)                  │
        │       │                                                      │
        │  NoIdentifierField                                           │
        │  NonIntegerIdentifier                                        │
        │                                                              │
        │  CollectionError               ConfigError                   │
        │  (DATABASE)                    (CONFIG)                      │
        │       │                                                      │
        │  CollectionNotFound                                          │
        │  NoMoreRows                                                  │
        │  QueryError                                                  │
        └──────────────────────────────────────────────────────────────┘

Propagation:
    - ``one``, ``one_by``, ``all_by``, ``all_op``, ``one_op`` raise directly.
    - ``exists`` and ``probe`` never raise; identifier failures fall back to
      the zero-value condition and collection failures become "absent"
      (``exists``) or ``Existence.UNKNOWN`` (``probe``).

Examples:
    >>> error = NoIdentifierField("no id field on Birthday")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.with_context(record_type="Birthday").context.record_type
    'Birthday'

Tags:
    error-handling, exception-hierarchy, error-context, recordkit

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    VALIDATION = "VALIDATION"  # Record shape, identifier, target container
    DATABASE = "DATABASE"  # Collection lookup, empty results, bad conditions
    CONFIG = "CONFIG"  # Invalid settings
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only non-None fields end up in :meth:`to_dict`, so errors can be logged
    with ``logger.warning("...", **error.to_dict())`` without noise.

    Attributes:
        collection: Name of the collection being queried
        record_type: Class name of the record involved
        column: Column or field name involved
        metadata: Additional key-value pairs
    """

    collection: str | None = None
    record_type: str | None = None
    column: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["collection", "record_type", "column"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RecordKitError(Exception):
    """
    Base exception for all recordkit errors.

    Subclasses set ``default_category`` to classify themselves; callers can
    override it per instance.

    Examples:
        >>> error = RecordKitError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> try:
        ...     raise KeyError("born")
        ... except KeyError as e:
        ...     error = QueryError("unknown column", cause=e)
        >>> error.cause
        KeyError('born')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RecordKitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CollectionNotFound("missing").with_context(collection="birthdays")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# IDENTIFIER ERRORS
# =============================================================================


class IdentifierResolutionError(RecordKitError):
    """The identifier of a record could not be resolved."""

    default_category = ErrorCategory.VALIDATION


class NoIdentifierField(IdentifierResolutionError):
    """The record has zero, or more than one, field named ``id``."""


class NonIntegerIdentifier(IdentifierResolutionError):
    """The ``id`` field exists but does not hold an integer."""


class SequenceExpected(RecordKitError):
    """A multi-row materializer was handed something other than a mutable sequence."""

    default_category = ErrorCategory.VALIDATION


# =============================================================================
# COLLECTION ERRORS
# =============================================================================


class CollectionError(RecordKitError):
    """Base for errors raised by the bundled collection adapter."""

    default_category = ErrorCategory.DATABASE


class CollectionNotFound(CollectionError):
    """No table with the requested name exists."""


class NoMoreRows(CollectionError):
    """A single-row fetch matched nothing."""


class QueryError(CollectionError):
    """A condition, sort key or projection could not be compiled."""


class ConfigError(RecordKitError):
    """Invalid recordkit configuration."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
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
