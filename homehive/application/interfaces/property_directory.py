from homehive.domain.entities.property import PropertyInfo


class PropertyDirectory:
    """Read-only property lookup owned by the listings service."""

    async def get_property(self, property_id: str) -> PropertyInfo | None:
        raise NotImplementedError
