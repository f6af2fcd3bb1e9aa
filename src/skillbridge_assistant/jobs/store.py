"""Job store interfaces and concrete adapters."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from skillbridge_assistant.errors import JobStoreError
from skillbridge_assistant.types import JobRecord

logger = logging.getLogger(__name__)

SAMPLE_JOBS: tuple[JobRecord, ...] = (
    JobRecord(
        id=None,
        title="Desenvolvedor Java Pleno",
        company="Tech Solutions",
        location="São Paulo, SP - Híbrido",
        requirements="Java 11+, Spring Boot, REST, SQL",
    ),
    JobRecord(
        id=None,
        title="Frontend React Developer",
        company="UI Labs",
        location="Remoto",
        requirements="React, TypeScript, Tailwind/DaisyUI, testes",
    ),
    JobRecord(
        id=None,
        title="Analista de Dados Jr.",
        company="DataCorp",
        location="Campinas, SP - Presencial",
        requirements="SQL, Python, ETL básicos, Power BI",
    ),
)


class JobStore(Protocol):
    """Lookup contract the job matcher depends on."""

    def find_by_title_contains_ignore_case(self, term: str) -> list[JobRecord]:
        """Return jobs whose title contains `term`, ignoring case."""

    def find_by_company_contains_ignore_case(self, term: str) -> list[JobRecord]:
        """Return jobs whose company contains `term`, ignoring case."""


class InMemoryJobStore:
    """Deterministic job store used for tests and local runs."""

    def __init__(self, records: list[JobRecord] | None = None) -> None:
        self._records: dict[int, JobRecord] = {}
        self._next_id = 1
        for record in records or []:
            self.add(record)

    def add(self, record: JobRecord) -> JobRecord:
        job_id = record.id if record.id is not None else self._next_id
        stored = JobRecord(
            id=job_id,
            title=record.title,
            company=record.company,
            location=record.location,
            requirements=record.requirements,
        )
        self._records[job_id] = stored
        self._next_id = max(self._next_id, job_id + 1)
        return stored

    def count(self) -> int:
        return len(self._records)

    def find_by_title_contains_ignore_case(self, term: str) -> list[JobRecord]:
        needle = term.casefold()
        return [rec for rec in self._records.values() if needle in (rec.title or "").casefold()]

    def find_by_company_contains_ignore_case(self, term: str) -> list[JobRecord]:
        needle = term.casefold()
        return [rec for rec in self._records.values() if needle in (rec.company or "").casefold()]


class SqliteJobStore:
    """Job store backed by a local SQLite table.

    SQLite's `LIKE` only folds ASCII, so lookups compare `casefold`ed values
    through a registered `fold` function instead.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        try:
            with self._connect() as conn:
                conn.execute(
                    "CREATE TABLE IF NOT EXISTS jobs ("
                    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                    "title TEXT NOT NULL, company TEXT NOT NULL, "
                    "location TEXT NOT NULL, requirements TEXT NOT NULL)"
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise JobStoreError(f"Cannot open job store at {self._path}: {exc}") from exc

    def add(self, record: JobRecord) -> JobRecord:
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    "INSERT INTO jobs(title, company, location, requirements) VALUES(?, ?, ?, ?)",
                    (record.title, record.company, record.location, record.requirements),
                )
                conn.commit()
                job_id = cur.lastrowid
        except sqlite3.Error as exc:
            raise JobStoreError(f"Cannot insert job: {exc}") from exc
        return JobRecord(
            id=job_id,
            title=record.title,
            company=record.company,
            location=record.location,
            requirements=record.requirements,
        )

    def count(self) -> int:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT COUNT(*) FROM jobs").fetchone()
        except sqlite3.Error as exc:
            raise JobStoreError(f"Cannot count jobs: {exc}") from exc
        return int(row[0])

    def find_by_title_contains_ignore_case(self, term: str) -> list[JobRecord]:
        return self._find_containing("title", term)

    def find_by_company_contains_ignore_case(self, term: str) -> list[JobRecord]:
        return self._find_containing("company", term)

    def _find_containing(self, column: str, term: str) -> list[JobRecord]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT id, title, company, location, requirements FROM jobs "
                    f"WHERE instr(fold({column}), fold(?)) > 0 ORDER BY id",
                    (term,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise JobStoreError(f"Job lookup by {column} failed: {exc}") from exc
        return [JobRecord(*row) for row in rows]

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path)
        conn.create_function("fold", 1, _fold, deterministic=True)
        return conn


def seed_sample_jobs(store: InMemoryJobStore | SqliteJobStore) -> int:
    """Insert `SAMPLE_JOBS` when the store is empty; return how many were added."""

    existing = store.count()
    if existing > 0:
        logger.info("Job store already holds %d job(s); skipping seed", existing)
        return 0
    for record in SAMPLE_JOBS:
        store.add(record)
    logger.info("Seeded %d sample job(s)", len(SAMPLE_JOBS))
    return len(SAMPLE_JOBS)


def _fold(value: str | None) -> str:
    return (value or "").casefold()
