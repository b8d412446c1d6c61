"""
Shared fixtures.

Repositories run against ``FakePool``: an in-memory stand-in for a psycopg2
pool that understands the statements repositories issue. It enforces
primary keys and foreign keys like the real schema (db/init_db.py) and raises
the same psycopg2 exceptions PostgreSQL would.
"""
import copy
import re
from datetime import date

import psycopg2.errors
import pytest

from db.connection import Database
from models import (
    Country,
    Disease,
    DiseaseType,
    Doctor,
    Patient,
    PublicServant,
)
from repositories import build_repositories

PRIMARY_KEYS = {
    "Country": ("cname",),
    "DiseaseType": ("id",),
    "Disease": ("disease_code",),
    "Users": ("email",),
    "Patients": ("email",),
    "PublicServant": ("email",),
    "Doctor": ("email",),
    "Discover": ("cname", "disease_code"),
    "Specialize": ("id", "email"),
    "PatientDisease": ("email", "disease_code"),
    "Record": ("email", "cname", "disease_code"),
}

SERIALS = {"DiseaseType": "id"}

FOREIGN_KEYS = {
    "Disease": [("id", "DiseaseType", "id")],
    "Users": [("cname", "Country", "cname")],
    "Discover": [("cname", "Country", "cname"), ("disease_code", "Disease", "disease_code")],
    "Specialize": [("id", "DiseaseType", "id"), ("email", "Doctor", "email")],
    "PatientDisease": [("email", "Patients", "email"), ("disease_code", "Disease", "disease_code")],
    "Record": [
        ("email", "PublicServant", "email"),
        ("cname", "Country", "cname"),
        ("disease_code", "Disease", "disease_code"),
    ],
}

SET_RE = re.compile(r"SET LOCAL statement_timeout = %s;")
COUNT_RE = re.compile(r"SELECT COUNT\(\*\) FROM (\w+);")
SELECT_RE = re.compile(r"SELECT (.+?) FROM (\w+)(?: WHERE (.+))?;")
INSERT_RE = re.compile(r"INSERT INTO (\w+) \((.+?)\) VALUES \((.+?)\)(?: RETURNING (.+))?;")
UPDATE_RE = re.compile(r"UPDATE (\w+) SET (.+?) WHERE (.+);")
DELETE_RE = re.compile(r"DELETE FROM (\w+) WHERE (.+);")


class FakeStore:
    """Committed state shared by every connection of a FakePool."""

    def __init__(self):
        self.tables = {name: [] for name in PRIMARY_KEYS}
        # sequences are not transactional, as in PostgreSQL
        self.sequences = {name: 0 for name in SERIALS}
        self.statements = []
        self.fail_next = None
        # (statement prefix, exception): arm fail_next once that statement runs
        self.fail_after = None

    def rows(self, table):
        return copy.deepcopy(self.tables[table])


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = -1
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    @property
    def work(self):
        return self.conn.work

    def execute(self, sql, params=()):
        store = self.conn.store
        store.statements.append((sql, params))
        if store.fail_next is not None:
            exc, store.fail_next = store.fail_next, None
            raise exc
        if store.fail_after and sql.startswith(store.fail_after[0]):
            store.fail_next, store.fail_after = store.fail_after[1], None
        sql = " ".join(sql.split())
        params = list(params or ())
        self._rows = []
        self.rowcount = -1

        if "CREATE TABLE" in sql or SET_RE.fullmatch(sql):
            return
        if m := COUNT_RE.fullmatch(sql):
            self._rows = [(len(self.work[m.group(1)]),)]
        elif m := SELECT_RE.fullmatch(sql):
            cols = m.group(1).split(", ")
            matched = self._match(m.group(2), m.group(3), params)
            self._rows = [tuple(r[c] for c in cols) for r in matched]
        elif m := INSERT_RE.fullmatch(sql):
            self._insert(m.group(1), m.group(2).split(", "), params, m.group(4))
        elif m := UPDATE_RE.fullmatch(sql):
            self._update(m.group(1), m.group(2), m.group(3), params)
        elif m := DELETE_RE.fullmatch(sql):
            self._delete(m.group(1), m.group(2), params)
        else:
            raise psycopg2.errors.SyntaxError(f"fake store cannot run: {sql}")

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    # ── statement handlers ────────────────────────────────

    def _match(self, table, where, params):
        rows = self.work[table]
        if not where:
            return list(rows)
        cols = [cond.split(" = ")[0] for cond in where.split(" AND ")]
        values = params[-len(cols):]
        return [r for r in rows if all(r[c] == v for c, v in zip(cols, values))]

    def _insert(self, table, cols, params, returning):
        row = dict(zip(cols, params))
        serial = SERIALS.get(table)
        if serial and serial not in row:
            self.conn.store.sequences[table] += 1
            row[serial] = self.conn.store.sequences[table]
        key = tuple(row[c] for c in PRIMARY_KEYS[table])
        if any(tuple(r[c] for c in PRIMARY_KEYS[table]) == key for r in self.work[table]):
            raise psycopg2.errors.UniqueViolation(
                f'duplicate key value violates unique constraint "{table.lower()}_pkey"'
            )
        self._check_references(table, row)
        self.work[table].append(row)
        self.rowcount = 1
        if returning:
            self._rows = [tuple(row[c] for c in returning.split(", "))]

    def _update(self, table, assignments, where, params):
        changes = {}
        position = 0
        for part in assignments.split(", "):
            col, value = part.split(" = ")
            if value == "%s":
                changes[col] = params[position]
                position += 1
        matched = self._match(table, where, params[position:])
        for row in matched:
            row.update(changes)
            self._check_references(table, row)
        self.rowcount = len(matched)

    def _delete(self, table, where, params):
        matched = self._match(table, where, params)
        for other, fks in FOREIGN_KEYS.items():
            for col, ref_table, ref_col in fks:
                if ref_table != table:
                    continue
                for row in matched:
                    if any(r[col] == row[ref_col] for r in self.work[other]):
                        raise psycopg2.errors.ForeignKeyViolation(
                            f'update or delete on table "{table.lower()}" violates '
                            f'foreign key constraint on table "{other.lower()}"'
                        )
        self.work[table] = [r for r in self.work[table] if r not in matched]
        self.rowcount = len(matched)

    def _check_references(self, table, row):
        for col, ref_table, ref_col in FOREIGN_KEYS.get(table, []):
            if not any(r[ref_col] == row[col] for r in self.work[ref_table]):
                raise psycopg2.errors.ForeignKeyViolation(
                    f'insert or update on table "{table.lower()}" violates foreign key '
                    f'constraint: key ({col})=({row[col]}) is not present in table "{ref_table.lower()}"'
                )


class FakeConnection:
    def __init__(self, store):
        self.store = store
        self.work = None
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        if self.work is None:
            self.work = copy.deepcopy(self.store.tables)
        return FakeCursor(self)

    def commit(self):
        if self.work is not None:
            self.store.tables = self.work
        self.work = None
        self.commits += 1

    def rollback(self):
        self.work = None
        self.rollbacks += 1


class FakePool:
    def __init__(self, store):
        self.store = store
        self.checked_out = []
        self.closed = False

    def getconn(self):
        conn = FakeConnection(self.store)
        self.checked_out.append(conn)
        return conn

    def putconn(self, conn):
        self.checked_out.remove(conn)

    def closeall(self):
        self.closed = True


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def fake_pool(store):
    return FakePool(store)


@pytest.fixture
def database(fake_pool):
    return Database(dsn="postgresql://test@localhost/test", statement_timeout_ms=0, connection_pool=fake_pool)


@pytest.fixture
def repos(database):
    return build_repositories(database)


@pytest.fixture
def seeded(repos):
    """Reference rows every relationship test needs."""
    repos.countries.create(Country(name="Italy", population=59_000_000))
    repos.countries.create(Country(name="Spain", population=47_000_000))
    viral = repos.disease_types.create(DiseaseType(description="viral"))
    bacterial = repos.disease_types.create(DiseaseType(description="bacterial"))
    repos.diseases.create(Disease(code="D01", pathogen="virus", description="Influenza", disease_type_id=viral.id))
    repos.diseases.create(Disease(code="D02", pathogen="virus", description="Measles", disease_type_id=viral.id))
    repos.diseases.create(Disease(code="D03", pathogen="bacteria", description="Cholera", disease_type_id=bacterial.id))
    repos.doctors.create(Doctor(email="house@clinic.org", degree="MD"))
    repos.doctors.create(Doctor(email="grey@clinic.org", degree="MD"))
    repos.patients.create(Patient(email="ann@mail.com"))
    repos.public_servants.create(PublicServant(email="clerk@gov.it", department="Health"))
    return repos


@pytest.fixture
def outbreak_date():
    return date(2020, 2, 20)
