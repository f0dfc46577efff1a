from typing import List, Optional, Protocol

from src.service.seat_hold.domain.entity.cart_item_entity import CartItemEntity
from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


class ICartStore(Protocol):
    """Records held seats for a later checkout"""

    def add_item(
        self,
        *,
        hold_id: Optional[str],
        seat: Optional[SeatEntity],
        concert: Optional[ConcertEntity],
        ttl_seconds: Optional[int] = None,
    ) -> Optional[CartItemEntity]: ...

    def remove_item(self, hold_id: str) -> None: ...

    @property
    def items(self) -> List[CartItemEntity]: ...
