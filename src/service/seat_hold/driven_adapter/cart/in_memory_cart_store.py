"""
In-memory Cart Store

Keeps held seats for checkout within one client session. Items carry their
own expiry so the cart drops holds the server has already released.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Optional

from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_cart_store import ICartStore
from src.service.seat_hold.domain.entity.cart_item_entity import CartItemEntity
from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.hold_entity import DEFAULT_HOLD_TTL_SECONDS
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCartStore(ICartStore):
    def __init__(
        self,
        *,
        default_ttl_seconds: int = DEFAULT_HOLD_TTL_SECONDS,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._items: List[CartItemEntity] = []

    def add_item(
        self,
        *,
        hold_id: Optional[str],
        seat: Optional[SeatEntity],
        concert: Optional[ConcertEntity],
        ttl_seconds: Optional[int] = None,
    ) -> Optional[CartItemEntity]:
        if not hold_id or seat is None or concert is None:
            Logger.base.warning('⚠️ [CART] Ignoring incomplete cart item')
            return None
        if any(item.hold_id == hold_id for item in self._items):
            return None

        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
        now = self._clock()
        item = CartItemEntity(
            hold_id=hold_id,
            seat=seat,
            concert=concert,
            ttl_seconds=ttl,
            expires_at=now + timedelta(seconds=ttl),
            added_at=now,
        )
        self._items.append(item)
        Logger.base.info(f'🛒 [CART] Added seat {seat.id} (hold {hold_id}, {ttl}s)')
        return item

    def remove_item(self, hold_id: str) -> None:
        self._items = [item for item in self._items if item.hold_id != hold_id]

    def clear(self) -> None:
        self._items = []

    @property
    def items(self) -> List[CartItemEntity]:
        now = self._clock()
        self._items = [item for item in self._items if not item.is_expired(now)]
        return list(self._items)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.seat.price for item in self.items), Decimal('0'))
