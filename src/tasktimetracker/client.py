import logging
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from tasktimetracker.exceptions import DatabaseError, MigrationError
from tasktimetracker.migrations import DOMAINS, Migration, MigrationRunner, MigrationStatus
from tasktimetracker.repositories import (
    BookingRepository,
    BookingTagAssignmentRepository,
    ImportanceRepository,
    TagRepository,
    TaskRepository,
)

logger = logging.getLogger(__name__)


class TimeTrackerClient:
    """
    Single access point to both stores: the booking calendar and the task
    tracker. Each store has its own engine, repositories and migrator.
    """

    def __init__(
        self,
        booking_engine: AsyncEngine,
        task_engine: AsyncEngine,
        booking_repo: BookingRepository,
        booking_tag_repo: TagRepository,
        booking_tag_assignment_repo: BookingTagAssignmentRepository,
        task_repo: TaskRepository,
        importance_repo: ImportanceRepository,
        task_tag_repo: TagRepository,
        migrators: Dict[str, MigrationRunner],
    ):
        self._booking_engine = booking_engine
        self._task_engine = task_engine

        self.bookings = booking_repo
        self.booking_tags = booking_tag_repo
        self.booking_tag_assignments = booking_tag_assignment_repo

        self.tasks = task_repo
        self.importances = importance_repo
        self.task_tags = task_tag_repo

        self.migrators = migrators

    def _select(self, domain: Optional[str]) -> List[MigrationRunner]:
        if domain is None or domain == "all":
            return [self.migrators[d] for d in DOMAINS]
        if domain not in self.migrators:
            raise MigrationError(f"Unknown migration domain '{domain}'")
        return [self.migrators[domain]]

    async def migrate(self, domain: Optional[str] = None, force: bool = False) -> Dict[str, List[Migration]]:
        """Applies pending migrations to one store or to both."""
        applied: Dict[str, List[Migration]] = {}
        for runner in self._select(domain):
            applied[runner.name] = await runner.run(force=force)
        return applied

    async def migration_status(self, domain: Optional[str] = None) -> Dict[str, List[MigrationStatus]]:
        return {runner.name: await runner.status() for runner in self._select(domain)}

    async def check_connections(self) -> dict[str, str]:
        """
        Checks that both stores answer. Returns a status per store.
        """
        statuses = {}

        try:
            await self.bookings.check_connection()
            statuses["bookings"] = "ok"
        except DatabaseError as e:
            statuses["bookings"] = f"failed: {e}"

        try:
            await self.importances.check_connection()
            statuses["tasks"] = "ok"
        except DatabaseError as e:
            statuses["tasks"] = f"failed: {e}"

        return statuses

    async def aclose(self) -> None:
        await self._booking_engine.dispose()
        await self._task_engine.dispose()
        logger.debug("Store engines disposed")
