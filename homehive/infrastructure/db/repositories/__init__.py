from homehive.infrastructure.db.repositories.idempotency_repo_sql import IdempotencyRepoSQL
from homehive.infrastructure.db.repositories.property_directory_sql import PropertyDirectorySQL
from homehive.infrastructure.db.repositories.reservation_store_sql import ReservationStoreSQL

__all__ = [
    "IdempotencyRepoSQL",
    "PropertyDirectorySQL",
    "ReservationStoreSQL",
]
