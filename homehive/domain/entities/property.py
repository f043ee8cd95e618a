"""Proyección de solo lectura de una propiedad."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PropertyInfo:
    """Datos de la propiedad que necesita el motor de reservas."""

    id: str
    host_id: str
    capacity: int
