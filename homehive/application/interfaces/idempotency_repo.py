from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class IdempotencyRecord:
    """
    Resultado guardado de una operación ejecutada bajo una clave.

    `scope` separa los espacios de claves (creación de reservas, eventos de
    Stripe); `request_hash` identifica el payload que produjo `result`.
    """

    scope: str
    key: str
    request_hash: str
    result: dict[str, Any] = field(default_factory=dict)
    reservation_id: str | None = None

    def matches(self, request_hash: str) -> bool:
        return self.request_hash == request_hash


class IdempotencyRepo:
    async def get(self, scope: str, key: str) -> IdempotencyRecord | None:
        raise NotImplementedError

    async def save(self, record: IdempotencyRecord) -> None:
        """Raises DuplicateError when (scope, key) is already stored."""
        raise NotImplementedError
