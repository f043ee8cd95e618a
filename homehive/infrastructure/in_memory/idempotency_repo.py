from homehive.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from homehive.domain.errors import DuplicateError


class InMemoryIdempotencyRepo(IdempotencyRepo):
    def __init__(self) -> None:
        self.records: dict[tuple[str, str], IdempotencyRecord] = {}

    async def get(self, scope: str, key: str) -> IdempotencyRecord | None:
        return self.records.get((scope, key))

    async def save(self, record: IdempotencyRecord) -> None:
        if (record.scope, record.key) in self.records:
            raise DuplicateError(f"Clave de idempotencia ya registrada en '{record.scope}'")
        self.records[(record.scope, record.key)] = record
