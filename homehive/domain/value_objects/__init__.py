"""Value Objects del dominio de reservas."""

from homehive.domain.value_objects.date_range import DateRange, overlaps
from homehive.domain.value_objects.money import Money

__all__ = [
    "DateRange",
    "Money",
    "overlaps",
]
