from datetime import datetime

import attrs

from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


@attrs.frozen
class CartItemEntity:
    hold_id: str
    seat: SeatEntity
    concert: ConcertEntity
    ttl_seconds: int
    expires_at: datetime
    added_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
