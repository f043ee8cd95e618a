"""Interface IdGenerator - Puerto para generación de identificadores únicos."""

import uuid
from abc import ABC, abstractmethod


class IdGenerator(ABC):
    """
    Puerto para generación de identificadores de reservación.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def generate_reservation_id(self) -> str:
        """
        Genera un identificador opaco y único.

        Returns:
            String con UUID en formato estándar.
        """
        raise NotImplementedError


class RealIdGenerator(IdGenerator):
    """Implementación real que genera UUIDs aleatorios."""

    def generate_reservation_id(self) -> str:
        return str(uuid.uuid4())


class FakeIdGenerator(IdGenerator):
    """
    Implementación fake para testing.

    Genera valores predecibles para pruebas deterministas.
    """

    def __init__(self, prefix: str = "res"):
        self._prefix = prefix
        self._counter = 0

    def generate_reservation_id(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter:04d}"

    def reset(self) -> None:
        self._counter = 0
