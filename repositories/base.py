"""
repositories/base.py
--------------------
Generic table repository.

Every table in the registry is accessed the same way: list, get by key,
create, update the non-key columns, delete by key. ``EntityRepository``
implements that once; each concrete repository only declares its table
layout through class attributes:

    entity            dataclass the rows map to
    table             SQL table name
    columns           field name -> column name, in SELECT order
    key_fields        fields forming the identity (one, two or three)
    mutable_fields    fields rewritten by update()
    generated_fields  fields assigned by the server on INSERT
"""

import dataclasses
from datetime import date
from typing import Generic, Optional, TypeVar, get_args, get_type_hints

from db.connection import Database
from exceptions import RepositoryError, ValidationError
from utils.logger import get_logger
from utils.validators import require_date, require_int, require_text

logger = get_logger(__name__)

EntityT = TypeVar("EntityT")

_KEY_CHECKS = {int: require_int, str: require_text, date: require_date}


class EntityRepository(Generic[EntityT]):
    """CRUD operations on one table, configured by the subclass."""

    entity: type
    table: str
    columns: dict[str, str]
    key_fields: tuple[str, ...]
    mutable_fields: tuple[str, ...] = ()
    generated_fields: tuple[str, ...] = ()

    def __init__(self, database: Database):
        self.database = database

    @property
    def name(self) -> str:
        return self.entity.__name__

    # ── READ ──────────────────────────────────────────────

    def list_all(self, timeout: Optional[float] = None) -> list[EntityT]:
        """
        Fetch every row of the table.

        Returns:
            Entities in store order (callers must not rely on it); empty list if none.
        """
        sql = f"SELECT {self._column_list()} FROM {self.table};"
        with self.database.transaction(timeout, self.name) as cur:
            cur.execute(sql)
            return [self._row_to_entity(r) for r in cur.fetchall()]

    def get(self, *key, timeout: Optional[float] = None) -> Optional[EntityT]:
        """
        Fetch a single row by its full key.

        Returns:
            The entity, or None if no row has that key.
        """
        key = self._check_key(key)
        sql = f"SELECT {self._column_list()} FROM {self.table} WHERE {self._key_clause()};"
        with self.database.transaction(timeout, self.name) as cur:
            cur.execute(sql, key)
            row = cur.fetchone()
            return self._row_to_entity(row) if row else None

    def count(self, timeout: Optional[float] = None) -> int:
        sql = f"SELECT COUNT(*) FROM {self.table};"
        with self.database.transaction(timeout, self.name) as cur:
            cur.execute(sql)
            return cur.fetchone()[0]

    # ── CREATE ────────────────────────────────────────────

    def create(self, entity: EntityT, timeout: Optional[float] = None) -> EntityT:
        """
        Insert a new row.

        Args:
            entity: The domain object to persist.

        Returns:
            The entity as stored, with server-generated fields populated.

        Raises:
            ValidationError: If the entity is malformed (nothing is sent).
            DuplicateKey: If a row with the same key exists.
            MissingReference: If a referenced row does not exist.
        """
        self._validate(entity)
        try:
            with self.database.transaction(timeout, self.name) as cur:
                created = self._insert(cur, entity)
            logger.info(f"Created {self.name} {self.key_of(created)}")
            return created
        except RepositoryError as e:
            logger.error(f"Failed to create {self.name}: {e}")
            raise

    # ── UPDATE ────────────────────────────────────────────

    def update(self, entity: EntityT, timeout: Optional[float] = None) -> int:
        """
        Rewrite every mutable field of the row addressed by the entity's key.
        Key fields are never written.

        Returns:
            Number of rows affected: 0 if the key does not exist, else 1.
        """
        self._validate(entity)
        key = self._check_key(self.key_of(entity))
        if self.mutable_fields:
            assignments = ", ".join(f"{self.columns[f]} = %s" for f in self.mutable_fields)
            params = tuple(getattr(entity, f) for f in self.mutable_fields) + key
        else:
            # nothing to rewrite; still report whether the row exists
            first = self.columns[self.key_fields[0]]
            assignments = f"{first} = {first}"
            params = key
        sql = f"UPDATE {self.table} SET {assignments} WHERE {self._key_clause()};"
        try:
            with self.database.transaction(timeout, self.name) as cur:
                cur.execute(sql, params)
                updated = cur.rowcount
            logger.info(f"Updated {self.name} {key} ({updated} row(s))")
            return updated
        except RepositoryError as e:
            logger.error(f"Failed to update {self.name} {key}: {e}")
            raise

    def replace(self, old_key: tuple, entity: EntityT, timeout: Optional[float] = None) -> int:
        """
        Move a row to a new key in a single transaction.

        The old row is deleted and the new one inserted; if either step fails
        both are rolled back and the old row is left untouched.

        Args:
            old_key: Full key of the row to replace.
            entity: The new row, key fields included.

        Returns:
            1 if the row was replaced, 0 if ``old_key`` did not exist
            (in which case nothing is inserted).
        """
        old_key = self._check_key(tuple(old_key))
        self._validate(entity)
        sql = f"DELETE FROM {self.table} WHERE {self._key_clause()};"
        try:
            with self.database.transaction(timeout, self.name) as cur:
                cur.execute(sql, old_key)
                if cur.rowcount == 0:
                    return 0
                created = self._insert(cur, entity)
            logger.info(f"Replaced {self.name} {old_key} with {self.key_of(created)}")
            return 1
        except RepositoryError as e:
            logger.error(f"Failed to replace {self.name} {old_key}: {e}")
            raise

    # ── DELETE ────────────────────────────────────────────

    def delete(self, *key, timeout: Optional[float] = None) -> int:
        """
        Delete a row by its full key.

        Returns:
            Number of rows deleted: 0 if the key does not exist, else 1.

        Raises:
            MissingReference: If other rows still reference this one.
        """
        key = self._check_key(key)
        sql = f"DELETE FROM {self.table} WHERE {self._key_clause()};"
        try:
            with self.database.transaction(timeout, self.name) as cur:
                cur.execute(sql, key)
                deleted = cur.rowcount
            if deleted:
                logger.info(f"Deleted {self.name} {key}")
            return deleted
        except RepositoryError as e:
            logger.error(f"Failed to delete {self.name} {key}: {e}")
            raise

    # ── HELPERS ───────────────────────────────────────────

    def key_of(self, entity: EntityT) -> tuple:
        return tuple(getattr(entity, f) for f in self.key_fields)

    def _insert(self, cur, entity: EntityT) -> EntityT:
        fields = [f for f in self.columns if f not in self.generated_fields]
        placeholders = ", ".join(["%s"] * len(fields))
        sql = (
            f"INSERT INTO {self.table} ({', '.join(self.columns[f] for f in fields)}) "
            f"VALUES ({placeholders})"
        )
        if self.generated_fields:
            sql += f" RETURNING {', '.join(self.columns[f] for f in self.generated_fields)}"
        cur.execute(sql + ";", tuple(getattr(entity, f) for f in fields))
        if not self.generated_fields:
            return entity
        row = cur.fetchone()
        return dataclasses.replace(entity, **dict(zip(self.generated_fields, row)))

    def _validate(self, entity: EntityT) -> None:
        if not isinstance(entity, self.entity):
            raise ValidationError(
                f"expected {self.name}, got {type(entity).__name__}", self.name
            )
        try:
            entity.validate()
        except ValidationError as e:
            e.entity = self.name
            raise

    def _check_key(self, key: tuple) -> tuple:
        if len(key) != len(self.key_fields):
            raise ValidationError(
                f"key is ({', '.join(self.key_fields)}), got {len(key)} value(s)",
                self.name,
            )
        if any(part is None for part in key):
            raise ValidationError("key values must not be empty", self.name)
        hints = get_type_hints(self.entity)
        for field, part in zip(self.key_fields, key):
            # Optional[int] -> int
            kind = next((a for a in get_args(hints[field]) if a is not type(None)), hints[field])
            check = _KEY_CHECKS.get(kind)
            if check is None:
                continue
            try:
                check(part, field)
            except ValidationError as e:
                e.entity = self.name
                raise
        return key

    def _column_list(self) -> str:
        return ", ".join(self.columns.values())

    def _key_clause(self) -> str:
        return " AND ".join(f"{self.columns[f]} = %s" for f in self.key_fields)

    def _row_to_entity(self, row: tuple) -> EntityT:
        """Convert a database row tuple to a domain object."""
        return self.entity(**dict(zip(self.columns, row)))
