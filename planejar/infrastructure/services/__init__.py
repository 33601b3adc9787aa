"""Infrastructure services: demo data seeding and maintenance."""

from planejar.infrastructure.services.data_migration_service import (
    DataMigrationService,
    MigrationReport,
    MigrationStatus,
)

__all__ = ["DataMigrationService", "MigrationReport", "MigrationStatus"]
