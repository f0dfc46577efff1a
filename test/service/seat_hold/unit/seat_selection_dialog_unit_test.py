"""
Unit tests for SeatSelectionDialog

The dialog is exercised against a real SeatDetailController so the hold
timer, optimistic HELD and refresh-on-close run end to end.
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import ConflictError, TransportError, UpstreamError
from src.service.seat_hold.app.seat_detail_controller import SeatDetailController
from src.service.seat_hold.app.seat_selection_dialog import (
    ALREADY_RESERVED_MESSAGE,
    HOLD_EXPIRED_MESSAGE,
    RESERVE_FAILED_MESSAGE,
)
from src.service.seat_hold.app.seat_stream_client import SeatStreamClient, StreamCallbacks
from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.hold_entity import HoldGrant
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity
from src.service.seat_hold.domain.enum.seat_status import SeatStatus
from src.service.seat_hold.driven_adapter.cart.in_memory_cart_store import InMemoryCartStore
from test.service.seat_hold.fakes import FakeScheduler, MockEventSourceFactory


pytestmark = pytest.mark.unit


def make_seat(seat_id: str) -> SeatEntity:
    return SeatEntity(
        id=seat_id, row='2', number='7', price=Decimal('80'), status=SeatStatus.AVAILABLE
    )


class TestSeatSelectionDialog:
    def setup_method(self) -> None:
        self.scheduler = FakeScheduler()
        self.sources = MockEventSourceFactory()
        self.concert_repo = AsyncMock()
        self.concert_repo.fetch_concert_by_id.return_value = ConcertEntity(id='1', name='Gala')
        self.concert_repo.fetch_concert_seats.side_effect = lambda concert_id: [
            make_seat('s1'),
            make_seat('s2'),
        ]
        self.hold_repo = AsyncMock()
        self.hold_repo.create_seat_hold.return_value = HoldGrant(hold_id='h1', ttl_seconds=3)
        self.cart = InMemoryCartStore()
        self.controller = SeatDetailController(
            concert_query_repo=self.concert_repo,
            seat_hold_command_repo=self.hold_repo,
            seat_stream_client_factory=self._stream_factory,
            scheduler=self.scheduler,
            user_id='user_test_123',
            cart_store=self.cart,
        )

    def _stream_factory(self, *, concert_id: str, callbacks: StreamCallbacks) -> SeatStreamClient:
        return SeatStreamClient(
            concert_id=concert_id,
            base_url='http://api.test/api',
            event_source_factory=self.sources,
            scheduler=self.scheduler,
            callbacks=callbacks,
        )

    async def _open_dialog(self, *, close_on_expire: bool = False):
        await self.controller.mount('1')
        seat = self.controller.seats[0]
        self.controller.handle_seat_select(seat)
        return self.controller.create_selection_dialog(seat, close_on_expire=close_on_expire)

    @pytest.mark.asyncio
    async def test_confirm_holds_seat_and_fills_cart(self) -> None:
        dialog = await self._open_dialog()

        hold = await dialog.confirm()

        assert hold is not None
        assert dialog.hold_id == 'h1'
        assert dialog.confirmed is True
        assert dialog.error is None
        assert dialog.formatted_time == '00:03'
        assert self.controller.seats[0].status is SeatStatus.HELD
        assert [item.hold_id for item in self.cart.items] == ['h1']
        assert self.cart.items[0].ttl_seconds == 3

    @pytest.mark.asyncio
    async def test_countdown_is_visible_through_dialog(self) -> None:
        dialog = await self._open_dialog()
        await dialog.confirm()

        self.scheduler.advance(1)

        assert dialog.time_left == 2
        assert dialog.progress_percentage == pytest.approx(100 / 3)

    @pytest.mark.asyncio
    async def test_conflict_shows_already_reserved(self) -> None:
        # Given
        self.hold_repo.create_seat_hold.side_effect = ConflictError('HTTP 409')
        dialog = await self._open_dialog()

        # When
        hold = await dialog.confirm()

        # Then
        assert hold is None
        assert dialog.error == ALREADY_RESERVED_MESSAGE
        assert dialog.is_submitting is False
        assert self.controller.seats[0].status is SeatStatus.AVAILABLE
        assert self.cart.items == []

    @pytest.mark.asyncio
    async def test_upstream_message_wins(self) -> None:
        self.hold_repo.create_seat_hold.side_effect = ConflictError(
            'HTTP 409', upstream_message='Seat s1 is held by another user'
        )
        dialog = await self._open_dialog()

        await dialog.confirm()

        assert dialog.error == 'Seat s1 is held by another user'

    @pytest.mark.parametrize(
        'error',
        [UpstreamError('HTTP 500', 500), TransportError('offline'), RuntimeError('boom')],
    )
    @pytest.mark.asyncio
    async def test_other_failures_show_generic_message(self, error: Exception) -> None:
        self.hold_repo.create_seat_hold.side_effect = error
        dialog = await self._open_dialog()

        await dialog.confirm()

        assert dialog.error == RESERVE_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_retry_after_failure(self) -> None:
        self.hold_repo.create_seat_hold.side_effect = [ConflictError('HTTP 409'), HoldGrant('h2')]
        dialog = await self._open_dialog()

        await dialog.confirm()
        hold = await dialog.confirm()

        assert hold is not None
        assert hold.hold_id == 'h2'
        assert dialog.error is None

    @pytest.mark.asyncio
    async def test_expiry_message_and_cart_cleanup(self) -> None:
        dialog = await self._open_dialog()
        await dialog.confirm()

        self.scheduler.advance(3)

        assert dialog.error == HOLD_EXPIRED_MESSAGE
        assert dialog.expired is True
        assert dialog.hold_id is None
        assert dialog.is_open is True
        assert self.cart.items == []

    @pytest.mark.asyncio
    async def test_close_on_expire(self) -> None:
        dialog = await self._open_dialog(close_on_expire=True)
        await dialog.confirm()

        self.scheduler.advance(3)
        assert dialog.pending_close is not None
        await dialog.pending_close

        assert dialog.is_open is False
        assert self.concert_repo.fetch_concert_seats.await_count == 2

    @pytest.mark.asyncio
    async def test_close_stops_timer_and_refreshes(self) -> None:
        dialog = await self._open_dialog()
        await dialog.confirm()

        await dialog.close()
        await dialog.close()
        self.scheduler.advance(10)

        assert dialog.is_open is False
        assert dialog.error is None
        assert self.concert_repo.fetch_concert_seats.await_count == 2
        assert self.controller.selected_seat is None
        # Refresh replaced the optimistic HELD with server state
        assert self.controller.seats[0].status is SeatStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_change_seat_resets_hold_state(self) -> None:
        dialog = await self._open_dialog()
        await dialog.confirm()

        dialog.change_seat(self.controller.seats[1])
        self.scheduler.advance(10)

        assert dialog.seat.id == 's2'
        assert dialog.hold_id is None
        assert dialog.confirmed is False
        assert dialog.error is None
        assert dialog.time_left is None


class TestSeatSelectionDialogTeardownDuringHold:
    """The hold request is still in flight when the dialog or view goes away"""

    def setup_method(self) -> None:
        self.scheduler = FakeScheduler()
        self.request_started = asyncio.Event()
        self.release_response = asyncio.Event()
        self.concert_repo = AsyncMock()
        self.concert_repo.fetch_concert_by_id.return_value = ConcertEntity(id='1', name='Gala')
        self.concert_repo.fetch_concert_seats.side_effect = lambda concert_id: [make_seat('s1')]
        self.hold_repo = AsyncMock()
        self.hold_repo.create_seat_hold.side_effect = self._slow_hold
        self.cart = InMemoryCartStore()
        self.controller = SeatDetailController(
            concert_query_repo=self.concert_repo,
            seat_hold_command_repo=self.hold_repo,
            seat_stream_client_factory=lambda *, concert_id, callbacks: SeatStreamClient(
                concert_id=concert_id,
                base_url='http://api.test/api',
                event_source_factory=MockEventSourceFactory(),
                scheduler=self.scheduler,
                callbacks=callbacks,
            ),
            scheduler=self.scheduler,
            user_id='user_test_123',
            cart_store=self.cart,
        )

    async def _slow_hold(self, *, seat_id: str, user_id: str) -> HoldGrant:
        self.request_started.set()
        await self.release_response.wait()
        return HoldGrant(hold_id='h1', ttl_seconds=3)

    async def _start_confirm(self):
        await self.controller.mount('1')
        dialog = self.controller.create_selection_dialog(self.controller.seats[0])
        task = asyncio.create_task(dialog.confirm())
        await self.request_started.wait()
        return dialog, task

    def _assert_nothing_left_behind(self, dialog) -> None:
        assert dialog.hold is None
        assert dialog.confirmed is False
        assert dialog.error is None
        assert self.controller.active_hold is None
        assert self.controller.hold_timer is None
        assert self.controller.seats[0].status is SeatStatus.AVAILABLE
        assert self.cart.items == []
        self.hold_repo.cancel_seat_hold.assert_awaited_once_with(hold_id='h1')

        self.scheduler.advance(5)
        assert dialog.expired is False
        assert self.scheduler.pending == []

    @pytest.mark.asyncio
    async def test_close_while_hold_in_flight(self) -> None:
        # Given
        dialog, task = await self._start_confirm()

        # When
        await dialog.close()
        self.release_response.set()
        result = await task

        # Then
        assert result is None
        assert dialog.is_open is False
        self._assert_nothing_left_behind(dialog)

    @pytest.mark.asyncio
    async def test_unmount_while_hold_in_flight(self) -> None:
        # Given
        dialog, task = await self._start_confirm()

        # When
        self.controller.unmount()
        self.release_response.set()
        result = await task

        # Then
        assert result is None
        self._assert_nothing_left_behind(dialog)


class TestSeatSelectionDialogCancel:
    def setup_method(self) -> None:
        self.scheduler = FakeScheduler()
        self.concert_repo = AsyncMock()
        self.concert_repo.fetch_concert_by_id.return_value = ConcertEntity(id='1', name='Gala')
        self.concert_repo.fetch_concert_seats.side_effect = lambda concert_id: [make_seat('s1')]
        self.hold_repo = AsyncMock()
        self.hold_repo.create_seat_hold.return_value = HoldGrant(hold_id='h1', ttl_seconds=3)
        self.cart = InMemoryCartStore()
        self.controller = SeatDetailController(
            concert_query_repo=self.concert_repo,
            seat_hold_command_repo=self.hold_repo,
            seat_stream_client_factory=lambda *, concert_id, callbacks: SeatStreamClient(
                concert_id=concert_id,
                base_url='http://api.test/api',
                event_source_factory=MockEventSourceFactory(),
                scheduler=self.scheduler,
                callbacks=callbacks,
            ),
            scheduler=self.scheduler,
            user_id='user_test_123',
            cart_store=self.cart,
        )

    @pytest.mark.asyncio
    async def test_cancel_releases_hold_and_closes(self) -> None:
        await self.controller.mount('1')
        dialog = self.controller.create_selection_dialog(self.controller.seats[0])
        await dialog.confirm()

        await dialog.cancel()
        self.scheduler.advance(5)

        self.hold_repo.cancel_seat_hold.assert_awaited_once_with(hold_id='h1')
        assert dialog.is_open is False
        assert dialog.hold is None
        assert dialog.expired is False
        assert self.cart.items == []
        assert self.controller.active_hold is None
        assert self.concert_repo.fetch_concert_seats.await_count == 2

    @pytest.mark.asyncio
    async def test_cancel_still_closes_when_backend_refuses(self) -> None:
        self.hold_repo.cancel_seat_hold.side_effect = UpstreamError('HTTP 500', 500)
        await self.controller.mount('1')
        dialog = self.controller.create_selection_dialog(self.controller.seats[0])
        await dialog.confirm()

        await dialog.cancel()

        assert dialog.is_open is False
        assert self.cart.items == []
        assert self.concert_repo.fetch_concert_seats.await_count == 2

    @pytest.mark.asyncio
    async def test_cancel_without_hold_only_closes(self) -> None:
        await self.controller.mount('1')
        dialog = self.controller.create_selection_dialog(self.controller.seats[0])

        await dialog.cancel()

        self.hold_repo.cancel_seat_hold.assert_not_awaited()
        assert dialog.is_open is False
