"""Servicios de infraestructura."""

from homehive.infrastructure.services.access_policy import RoleBasedAccessPolicy

__all__ = [
    "RoleBasedAccessPolicy",
]
