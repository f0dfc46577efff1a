"""
Seat availability aggregates derived from a seat list.

Always recomputed from the current seats; nothing here is cached.
"""

from collections import defaultdict
from enum import StrEnum
from typing import Iterable, Sequence

import attrs

from src.service.seat_hold.domain.entity.seat_entity import SeatEntity
from src.service.seat_hold.domain.enum.seat_status import SeatStatus


DEFAULT_BLOCK = 'General'
LIMITED_AVAILABILITY_PERCENT = 20


class AvailabilityStatus(StrEnum):
    SOLD_OUT = 'SOLD_OUT'
    LIMITED = 'LIMITED'
    AVAILABLE = 'AVAILABLE'


@attrs.frozen
class SeatAvailability:
    total: int = 0
    available: int = 0
    held: int = 0
    sold: int = 0

    @classmethod
    def from_seats(cls, seats: Sequence[SeatEntity]) -> 'SeatAvailability':
        counts = {status: 0 for status in SeatStatus}
        for seat in seats:
            counts[seat.status] += 1
        return cls(
            total=len(seats),
            available=counts[SeatStatus.AVAILABLE],
            held=counts[SeatStatus.HELD],
            sold=counts[SeatStatus.SOLD],
        )


@attrs.frozen
class CategoryAvailability:
    category: str
    available: int = 0
    held: int = 0
    sold: int = 0


def group_seats_by_block(seats: Iterable[SeatEntity]) -> dict[str, list[SeatEntity]]:
    grouped: dict[str, list[SeatEntity]] = defaultdict(list)
    for seat in seats:
        grouped[seat.block or DEFAULT_BLOCK].append(seat)
    return dict(grouped)


def availability_by_category(seats: Iterable[SeatEntity]) -> list[CategoryAvailability]:
    counts: dict[str, dict[SeatStatus, int]] = defaultdict(lambda: {s: 0 for s in SeatStatus})
    for seat in seats:
        counts[seat.category][seat.status] += 1
    return [
        CategoryAvailability(
            category=category,
            available=by_status[SeatStatus.AVAILABLE],
            held=by_status[SeatStatus.HELD],
            sold=by_status[SeatStatus.SOLD],
        )
        for category, by_status in sorted(counts.items())
    ]


def availability_percentage(available: int, total: int) -> int:
    if total == 0:
        return 0
    return round(available / total * 100)


def availability_status(available: int, total: int) -> AvailabilityStatus:
    if available == 0:
        return AvailabilityStatus.SOLD_OUT
    if availability_percentage(available, total) < LIMITED_AVAILABILITY_PERCENT:
        return AvailabilityStatus.LIMITED
    return AvailabilityStatus.AVAILABLE


def availability_message(available: int) -> str:
    if available == 0:
        return 'Sold out'
    if available < 50:
        return f'Only {available} tickets left'
    if available < 200:
        return 'High demand'
    return 'Available'
