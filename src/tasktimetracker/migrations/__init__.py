from .runner import (
    DOMAINS,
    LEDGER_TABLE,
    AppliedMigration,
    Migration,
    MigrationRunner,
    MigrationStatus,
    bundled_migrations,
    load_migrations,
    split_statements,
)

__all__ = [
    "DOMAINS",
    "LEDGER_TABLE",
    "AppliedMigration",
    "Migration",
    "MigrationRunner",
    "MigrationStatus",
    "bundled_migrations",
    "load_migrations",
    "split_statements",
]
