from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

import attrs

from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


@attrs.frozen
class ConcertEntity:
    id: str
    name: str
    date: Optional[datetime] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    total_seats: Optional[int] = None
    available_seats: Optional[int] = None

    def with_seat_derived_fields(self, seats: Iterable[SeatEntity]) -> 'ConcertEntity':
        """Fill price range and seat counts the backend did not provide"""
        seats = list(seats)
        if not seats:
            return self
        prices = [seat.price for seat in seats]
        return attrs.evolve(
            self,
            min_price=self.min_price if self.min_price is not None else min(prices),
            max_price=self.max_price if self.max_price is not None else max(prices),
            total_seats=self.total_seats if self.total_seats is not None else len(seats),
            available_seats=(
                self.available_seats
                if self.available_seats is not None
                else sum(1 for seat in seats if seat.is_available)
            ),
        )
