from homehive.application.interfaces.property_directory import PropertyDirectory
from homehive.domain.entities.property import PropertyInfo


class InMemoryPropertyDirectory(PropertyDirectory):
    def __init__(self, properties: list[PropertyInfo] | None = None) -> None:
        self.properties: dict[str, PropertyInfo] = {p.id: p for p in properties or []}

    def add(self, prop: PropertyInfo) -> None:
        self.properties[prop.id] = prop

    async def get_property(self, property_id: str) -> PropertyInfo | None:
        return self.properties.get(property_id)
