from decimal import Decimal
from typing import Optional

import attrs

from src.service.seat_hold.domain.enum.seat_status import SeatStatus


DEFAULT_CATEGORY = 'Standard'


def _non_negative(instance: 'SeatEntity', attribute: attrs.Attribute, value: Decimal) -> None:
    if value < 0:
        raise ValueError(f'{attribute.name} must be non-negative, got {value}')


@attrs.frozen
class SeatEntity:
    id: str
    row: str
    number: str
    price: Decimal = attrs.field(converter=Decimal, validator=_non_negative)
    status: SeatStatus
    block: Optional[str] = None
    category: str = DEFAULT_CATEGORY

    @property
    def is_available(self) -> bool:
        return self.status is SeatStatus.AVAILABLE

    def with_status(self, status: SeatStatus) -> 'SeatEntity':
        return attrs.evolve(self, status=status)
