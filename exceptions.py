"""
exceptions.py
-------------
Error taxonomy of the data-access layer.

A missing row is not an error: repositories return ``None`` for it.
Everything else a repository can fail with derives from ``RepositoryError``,
so callers can tell malformed input, integrity rejections, deadlines and
generic store failures apart.
"""

from typing import Optional


class RepositoryError(Exception):
    """Base class for every error raised by the data-access layer."""

    def __init__(self, message: str, entity: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity = entity

    def __str__(self) -> str:
        if self.entity:
            return f"{self.entity}: {self.message}"
        return self.message


class ValidationError(RepositoryError):
    """Malformed input value. Always raised before the store is touched."""


class ConstraintViolation(RepositoryError):
    """The store rejected a write because of a key or integrity constraint."""


class DuplicateKey(ConstraintViolation):
    """A row with the same key already exists."""


class MissingReference(ConstraintViolation):
    """A foreign key points at a row that does not exist, or a delete would orphan one."""


class Timeout(RepositoryError):
    """The operation's deadline expired before the store answered."""


class StoreError(RepositoryError):
    """Connectivity, pool or SQL failure not covered by a more specific kind."""
