from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity
from src.service.seat_hold.domain.enum.seat_status import SeatStatus
from src.service.seat_hold.driven_adapter.cart.in_memory_cart_store import InMemoryCartStore


pytestmark = pytest.mark.unit

CONCERT = ConcertEntity(id='1', name='Gala')


def make_seat(seat_id: str, price: str = '50') -> SeatEntity:
    return SeatEntity(id=seat_id, row='1', number='1', price=price, status=SeatStatus.HELD)


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 7, 10, 19, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


class TestInMemoryCartStore:
    def setup_method(self) -> None:
        self.clock = FakeClock()
        self.cart = InMemoryCartStore(clock=self.clock)

    def test_add_item_computes_expiry(self) -> None:
        item = self.cart.add_item(hold_id='h1', seat=make_seat('s1'), concert=CONCERT, ttl_seconds=300)

        assert item is not None
        assert item.expires_at == self.clock.now + timedelta(seconds=300)
        assert self.cart.item_count == 1

    def test_default_ttl(self) -> None:
        item = self.cart.add_item(hold_id='h1', seat=make_seat('s1'), concert=CONCERT)

        assert item is not None
        assert item.ttl_seconds == 600

    def test_duplicate_hold_is_ignored(self) -> None:
        self.cart.add_item(hold_id='h1', seat=make_seat('s1'), concert=CONCERT)

        assert self.cart.add_item(hold_id='h1', seat=make_seat('s1'), concert=CONCERT) is None
        assert self.cart.item_count == 1

    @pytest.mark.parametrize(
        'hold_id,seat,concert',
        [(None, make_seat('s1'), CONCERT), ('h1', None, CONCERT), ('h1', make_seat('s1'), None)],
    )
    def test_incomplete_items_are_ignored(self, hold_id, seat, concert) -> None:
        assert self.cart.add_item(hold_id=hold_id, seat=seat, concert=concert) is None
        assert self.cart.items == []

    def test_expired_items_are_dropped(self) -> None:
        self.cart.add_item(hold_id='h1', seat=make_seat('s1'), concert=CONCERT, ttl_seconds=60)
        self.cart.add_item(hold_id='h2', seat=make_seat('s2'), concert=CONCERT, ttl_seconds=600)

        self.clock.now += timedelta(seconds=60)

        assert [item.hold_id for item in self.cart.items] == ['h2']

    def test_remove_clear_and_subtotal(self) -> None:
        self.cart.add_item(hold_id='h1', seat=make_seat('s1', '49.90'), concert=CONCERT)
        self.cart.add_item(hold_id='h2', seat=make_seat('s2', '100'), concert=CONCERT)
        assert self.cart.subtotal == Decimal('149.90')

        self.cart.remove_item('h1')
        assert self.cart.subtotal == Decimal('100')

        self.cart.clear()
        assert self.cart.subtotal == Decimal('0')
