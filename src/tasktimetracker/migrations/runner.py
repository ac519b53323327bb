# tasktimetracker/migrations/runner.py

from __future__ import annotations

import hashlib
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from ..exceptions import MigrationError

logger = logging.getLogger(__name__)

LEDGER_TABLE = "_migrations"
DOMAINS = ("bookings", "tasks")

_FILENAME_RE = re.compile(r"^(\d+)_(.+)\.sql$")

_LEDGER_DDL = f"""
CREATE TABLE IF NOT EXISTS {LEDGER_TABLE}
(
    version        INTEGER PRIMARY KEY NOT NULL,
    description    TEXT                NOT NULL,
    installed_on   TEXT                NOT NULL,
    checksum       TEXT                NOT NULL,
    execution_time INTEGER             NOT NULL
)
"""


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha384(self.sql.encode("utf-8")).hexdigest()

    @property
    def filename(self) -> str:
        return f"{self.version}_{self.description}.sql"

    def statements(self) -> List[str]:
        return split_statements(self.sql)


@dataclass(frozen=True)
class AppliedMigration:
    version: int
    description: str
    installed_on: str
    checksum: str
    execution_time: int


@dataclass(frozen=True)
class MigrationStatus:
    version: int
    description: str
    applied: bool
    installed_on: Optional[str] = None


def split_statements(sql: str) -> List[str]:
    """
    Splits a migration script into single statements.
    Drops `--` comments; the DDL here never carries ';' inside literals.
    """
    lines = []
    for line in sql.splitlines():
        idx = line.find("--")
        if idx != -1:
            line = line[:idx]
        lines.append(line)
    cleaned = "\n".join(lines)
    return [stmt.strip() for stmt in cleaned.split(";") if stmt.strip()]


def load_migrations(source: Union[Path, Traversable]) -> List[Migration]:
    """Reads `<version>_<description>.sql` files from source, ordered by version."""
    found: Dict[int, Migration] = {}
    for entry in source.iterdir():
        m = _FILENAME_RE.match(entry.name)
        if not m:
            continue
        version = int(m.group(1))
        if version in found:
            raise MigrationError(
                f"Duplicate migration version {version}: {found[version].filename} and {entry.name}"
            )
        found[version] = Migration(
            version=version,
            description=m.group(2),
            sql=entry.read_text(encoding="utf-8"),
        )
    return [found[v] for v in sorted(found)]


def bundled_migrations(domain: str) -> List[Migration]:
    """Migrations shipped inside the package for one store."""
    if domain not in DOMAINS:
        raise MigrationError(f"Unknown migration domain '{domain}'")
    return load_migrations(resources.files("tasktimetracker.migrations") / "sql" / domain)


class MigrationRunner:
    """
    Applies ordered migrations to one store and records them in a ledger.

    Every migration runs in its own transaction; a failing statement rolls the
    whole migration back and stops the run.
    """

    def __init__(self, engine: AsyncEngine, migrations: Iterable[Migration], name: str = "store"):
        self._engine = engine
        self._migrations = sorted(migrations, key=lambda m: m.version)
        self.name = name

    @property
    def migrations(self) -> List[Migration]:
        return list(self._migrations)

    async def _ensure_ledger(self, conn: AsyncConnection) -> None:
        await conn.exec_driver_sql(_LEDGER_DDL)

    async def applied(self) -> Dict[int, AppliedMigration]:
        async with self._engine.begin() as conn:
            await self._ensure_ledger(conn)
            res = await conn.execute(
                text(
                    f"SELECT version, description, installed_on, checksum, execution_time "
                    f"FROM {LEDGER_TABLE} ORDER BY version"
                )
            )
            return {row.version: AppliedMigration(*row) for row in res}

    def _validate(self, applied: Dict[int, AppliedMigration]) -> None:
        known = {m.version: m for m in self._migrations}
        for version, record in applied.items():
            migration = known.get(version)
            if migration is None:
                raise MigrationError(
                    f"[{self.name}] migration {version} was previously applied but is missing from the source"
                )
            if migration.checksum != record.checksum:
                raise MigrationError(
                    f"[{self.name}] migration {migration.filename} was previously applied but has been modified"
                )

    async def _execute(self, migration: Migration, record: bool) -> None:
        started = time.perf_counter()
        try:
            async with self._engine.begin() as conn:
                for stmt in migration.statements():
                    await conn.exec_driver_sql(stmt)
                if record:
                    elapsed_ms = int((time.perf_counter() - started) * 1000)
                    await conn.execute(
                        text(
                            f"INSERT INTO {LEDGER_TABLE} "
                            "(version, description, installed_on, checksum, execution_time) "
                            "VALUES (:version, :description, :installed_on, :checksum, :execution_time)"
                        ),
                        {
                            "version": migration.version,
                            "description": migration.description,
                            "installed_on": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                            "checksum": migration.checksum,
                            "execution_time": elapsed_ms,
                        },
                    )
        except SQLAlchemyError as e:
            logger.error(f"[{self.name}] migration {migration.filename} failed: {e}")
            raise MigrationError(f"[{self.name}] migration {migration.filename} failed: {e}") from e

    async def run(self, force: bool = False) -> List[Migration]:
        """
        Applies pending migrations and returns them.

        With force=True every statement of every migration is executed again;
        CREATE TABLE IF NOT EXISTS makes that a no-op on a migrated store.
        """
        applied = await self.applied()
        self._validate(applied)

        applied_now: List[Migration] = []
        for migration in self._migrations:
            if migration.version in applied:
                if force:
                    logger.info(f"[{self.name}] re-running migration {migration.filename}")
                    await self._execute(migration, record=False)
                continue
            logger.info(f"[{self.name}] applying migration {migration.filename}")
            await self._execute(migration, record=True)
            applied_now.append(migration)

        if not applied_now:
            logger.info(f"[{self.name}] schema is up to date")
        return applied_now

    async def status(self) -> List[MigrationStatus]:
        applied = await self.applied()
        out: List[MigrationStatus] = []
        for migration in self._migrations:
            record = applied.get(migration.version)
            out.append(
                MigrationStatus(
                    version=migration.version,
                    description=migration.description,
                    applied=record is not None,
                    installed_on=record.installed_on if record else None,
                )
            )
        return out
