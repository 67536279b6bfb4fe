# barbershop/core/scope.py

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Scope:
    """Who an availability question is about.

    ``Scope.general()`` asks "can anyone be booked", ``Scope.for_barber(id)``
    asks "can this barber be booked". Build it from the caller's intent,
    never from the multi-barber flag.
    """

    barber_id: Optional[int] = None

    @classmethod
    def general(cls) -> "Scope":
        return cls()

    @classmethod
    def for_barber(cls, barber_id: int) -> "Scope":
        return cls(barber_id)

    @classmethod
    def of(cls, barber_id: Optional[int]) -> "Scope":
        return cls() if barber_id is None else cls(barber_id)

    @property
    def is_general(self) -> bool:
        return self.barber_id is None

    def covers(self, owner_id: Optional[int]) -> bool:
        """General-or-scoped override rule.

        A record with no owner applies to every scope; an owned record applies
        only to that barber's scope. The general scope sees only unowned records.
        """
        return owner_id is None or owner_id == self.barber_id

    def __str__(self) -> str:
        return "general" if self.is_general else f"barber:{self.barber_id}"
