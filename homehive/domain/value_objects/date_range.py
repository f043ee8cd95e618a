"""Value Object DateRange - intervalo de noches [check_in, check_out)."""

import calendar
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from homehive.domain.errors import InvalidDateRangeError


@dataclass(frozen=True)
class DateRange:
    """
    Value Object inmutable que representa un intervalo semiabierto de fechas.

    start es inclusivo (check-in) y end es exclusivo (check-out): una estancia
    2024-03-01 -> 2024-03-05 ocupa las noches del 1 al 4 y libera el día 5.

    Attributes:
        start: Fecha de check-in.
        end: Fecha de check-out.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidDateRangeError(
                f"check_out debe ser posterior a check_in: {self.start} >= {self.end}"
            )

    @property
    def nights(self) -> int:
        """Número de noches del rango."""
        return (self.end - self.start).days

    def overlaps_with(self, other: "DateRange") -> bool:
        """Verifica si este rango se superpone con otro (rangos que se tocan no se superponen)."""
        return overlaps(self, other)

    def contains(self, day: date) -> bool:
        """Verifica si una noche está dentro del rango."""
        return self.start <= day < self.end

    def iter_dates(self) -> Iterator[date]:
        """Itera cada noche ocupada del rango."""
        current = self.start
        while current < self.end:
            yield current
            current += timedelta(days=1)

    def intersection(self, other: "DateRange") -> "DateRange | None":
        """Retorna la parte común de ambos rangos, o None si no se superponen."""
        if not overlaps(self, other):
            return None
        return DateRange(start=max(self.start, other.start), end=min(self.end, other.end))

    def as_tuple(self) -> tuple[date, date]:
        return (self.start, self.end)

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def from_dates(cls, check_in: date, check_out: date) -> "DateRange":
        """Factory method para crear desde check_in y check_out."""
        return cls(start=check_in, end=check_out)

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateRange":
        """Rango que cubre todas las noches de un mes (month de 1 a 12)."""
        if not 1 <= month <= 12:
            raise InvalidDateRangeError(f"mes fuera de rango: {month}")
        last_day = calendar.monthrange(year, month)[1]
        return cls(start=date(year, month, 1), end=date(year, month, last_day) + timedelta(days=1))


def overlaps(a: DateRange, b: DateRange) -> bool:
    """Única definición de superposición: a.start < b.end AND b.start < a.end."""
    return a.start < b.end and b.start < a.end
