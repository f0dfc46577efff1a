"""
Seat Detail Controller - view model for one concert's seat map

Responsibilities:
1. Load concert details and seats concurrently, mapping failures to messages
2. Keep exactly one SeatStreamClient open for the current concert and merge
   its updates into the seat list
3. Run the hold workflow for the selection dialog (optimistic HELD, countdown)
4. Reconcile with the backend via refresh() whenever the dialog closes
"""

import asyncio
from functools import partial
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol

from src.platform.exception.exceptions import (
    CustomBaseError,
    DomainError,
    HoldSupersededError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.hold_timer import HoldTimer
from src.service.seat_hold.app.interface.i_cart_store import ICartStore
from src.service.seat_hold.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.seat_hold.app.interface.i_scheduler import IScheduler
from src.service.seat_hold.app.interface.i_seat_hold_command_repo import ISeatHoldCommandRepo
from src.service.seat_hold.app.seat_stream_client import SeatStreamClient, StreamCallbacks
from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.hold_entity import DEFAULT_HOLD_TTL_SECONDS, HoldEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity
from src.service.seat_hold.domain.enum.connection_state import ConnectionState
from src.service.seat_hold.domain.enum.seat_status import SeatStatus
from src.service.seat_hold.domain.value_object.seat_availability import (
    CategoryAvailability,
    SeatAvailability,
    availability_by_category,
    group_seats_by_block,
)


if TYPE_CHECKING:
    from src.service.seat_hold.app.seat_selection_dialog import SeatSelectionDialog


NO_CONCERT_ID_MESSAGE = 'No concert id provided'
CONCERT_NOT_FOUND_MESSAGE = 'Concert not found'
LOAD_FAILED_MESSAGE = 'Failed to load concert details'


class SeatStreamClientFactory(Protocol):
    def __call__(self, *, concert_id: str, callbacks: StreamCallbacks) -> SeatStreamClient: ...


class SeatDetailController:
    def __init__(
        self,
        *,
        concert_query_repo: IConcertQueryRepo,
        seat_hold_command_repo: ISeatHoldCommandRepo,
        seat_stream_client_factory: SeatStreamClientFactory,
        scheduler: IScheduler,
        user_id: str,
        cart_store: Optional[ICartStore] = None,
        hold_default_ttl_seconds: int = DEFAULT_HOLD_TTL_SECONDS,
        hold_timer_tick_seconds: float = 1.0,
    ) -> None:
        self.concert_query_repo = concert_query_repo
        self.seat_hold_command_repo = seat_hold_command_repo
        self.seat_stream_client_factory = seat_stream_client_factory
        self.scheduler = scheduler
        self.user_id = user_id
        self.cart_store = cart_store
        self.hold_default_ttl_seconds = hold_default_ttl_seconds
        self.hold_timer_tick_seconds = hold_timer_tick_seconds
        # Called after every observable state change
        self.on_change: Optional[Callable[[], None]] = None

        self.concert_id: Optional[str] = None
        self.concert: Optional[ConcertEntity] = None
        self.seats: List[SeatEntity] = []
        self.loading = False
        self.error: Optional[str] = None
        self.error_detail: Optional[Exception] = None
        self.selected_seat: Optional[SeatEntity] = None
        self.connection_status = ConnectionState.CLOSED
        self.stream_error: Optional[Exception] = None
        self.active_hold: Optional[HoldEntity] = None

        self._stream: Optional[SeatStreamClient] = None
        self._hold_timer: Optional[HoldTimer] = None
        self._load_generation = 0
        self._hold_generation = 0

    # ---------- derived view model ----------

    @property
    def seats_by_block(self) -> dict[str, list[SeatEntity]]:
        return group_seats_by_block(self.seats)

    @property
    def availability(self) -> SeatAvailability:
        return SeatAvailability.from_seats(self.seats)

    @property
    def availability_by_category(self) -> list[CategoryAvailability]:
        return availability_by_category(self.seats)

    @property
    def hold_timer(self) -> Optional[HoldTimer]:
        return self._hold_timer

    @property
    def stream(self) -> Optional[SeatStreamClient]:
        return self._stream

    # ---------- lifecycle ----------

    async def mount(self, concert_id: Optional[str]) -> None:
        await self.set_concert_id(concert_id)

    async def set_concert_id(self, concert_id: Optional[str]) -> None:
        """Switch concerts; the old subscription is closed before anything else happens"""
        self._close_stream()
        self.release_hold_timer()
        self.concert_id = concert_id
        self.concert = None
        self.seats = []
        self.selected_seat = None
        self.active_hold = None

        if concert_id:
            self._open_stream(concert_id)
        await self.load()

    def unmount(self) -> None:
        self._load_generation += 1
        self._close_stream()
        self.release_hold_timer()
        self.loading = False
        Logger.base.info(f'👋 [SEAT-DETAIL] Unmounted concert {self.concert_id}')

    def _open_stream(self, concert_id: str) -> None:
        self.stream_error = None
        self._stream = self.seat_stream_client_factory(
            concert_id=concert_id,
            callbacks=StreamCallbacks(
                on_seat_update=self.update_seat_status,
                on_connection_change=self._handle_connection_change,
                on_error=self._handle_stream_error,
            ),
        )
        self._stream.connect()

    def _close_stream(self) -> None:
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.close()
        self.connection_status = ConnectionState.CLOSED

    def reconnect_stream(self) -> None:
        if self._stream is None:
            return
        self.stream_error = None
        self._stream.reconnect()
        self._notify()

    def _handle_connection_change(self, state: ConnectionState) -> None:
        self.connection_status = state
        if state is ConnectionState.CONNECTED:
            self.stream_error = None
        self._notify()

    def _handle_stream_error(self, error: Exception) -> None:
        # Seats stay visible, only the badge degrades
        self.stream_error = error
        self._notify()

    # ---------- loading ----------

    @Logger.io
    async def load(self) -> None:
        self._load_generation += 1
        generation = self._load_generation

        if not self.concert_id:
            self._set_error(DomainError(NO_CONCERT_ID_MESSAGE), NO_CONCERT_ID_MESSAGE)
            self.loading = False
            self._notify()
            return

        self.loading = True
        self.error = None
        self.error_detail = None
        self._notify()

        results = await asyncio.gather(
            self.concert_query_repo.fetch_concert_by_id(self.concert_id),
            self.concert_query_repo.fetch_concert_seats(self.concert_id),
            return_exceptions=True,
        )
        if generation != self._load_generation:
            Logger.base.debug(f'[SEAT-DETAIL] Discarding stale load for {self.concert_id}')
            return

        concert, seats = results
        failure = next((r for r in results if isinstance(r, BaseException)), None)
        if failure is None:
            self.seats = list(seats)  # type: ignore[arg-type]
            self.concert = concert.with_seat_derived_fields(self.seats)  # type: ignore[union-attr]
            self.error = None
            self.error_detail = None
        elif isinstance(failure, NotFoundError):
            self._set_error(failure, CONCERT_NOT_FOUND_MESSAGE)
        elif isinstance(failure, CustomBaseError):
            self._set_error(failure, failure.upstream_message or LOAD_FAILED_MESSAGE)
        elif isinstance(failure, Exception):
            Logger.base.exception(f'❌ [SEAT-DETAIL] Unexpected load failure: {failure}')
            self._set_error(failure, LOAD_FAILED_MESSAGE)
        else:
            raise failure

        self.loading = False
        self._notify()

    async def refresh(self) -> None:
        await self.load()

    def _set_error(self, error: Exception, message: str) -> None:
        Logger.base.warning(f'⚠️ [SEAT-DETAIL] {message} ({type(error).__name__}: {error})')
        self.error = message
        self.error_detail = error

    # ---------- seat state ----------

    def handle_seat_select(self, seat: SeatEntity) -> None:
        if seat.status is not SeatStatus.AVAILABLE:
            return
        self.selected_seat = seat
        self._notify()

    def clear_seat_selection(self) -> None:
        self.selected_seat = None
        self._notify()

    def update_seat_status(self, seat_id: str, status: SeatStatus) -> bool:
        """Replace exactly one seat's status; returns False for unknown seats"""
        for index, seat in enumerate(self.seats):
            if seat.id == seat_id:
                if seat.status is not status:
                    self.seats[index] = seat.with_status(status)
                    self._notify()
                return True
        return False

    # ---------- hold workflow ----------

    @Logger.io
    async def confirm_hold(
        self, seat: SeatEntity, *, on_expire: Optional[Callable[[], None]] = None
    ) -> HoldEntity:
        generation = self._hold_generation
        grant = await self.seat_hold_command_repo.create_seat_hold(
            seat_id=seat.id, user_id=self.user_id
        )
        if generation != self._hold_generation:
            # Dialog closed or view torn down while the request was in flight
            await self._cancel_orphaned_hold(grant.hold_id)
            raise HoldSupersededError(f'Hold {grant.hold_id} on seat {seat.id} was superseded')

        hold = HoldEntity.from_grant(
            grant,
            seat=seat,
            concert=self.concert,
            default_ttl_seconds=self.hold_default_ttl_seconds,
        )

        # Optimistic, reconciled by the refresh that follows the dialog closing
        self.update_seat_status(seat.id, SeatStatus.HELD)
        self.active_hold = hold

        self.release_hold_timer()
        timer = HoldTimer(
            hold.ttl_seconds,
            partial(self._handle_hold_expired, on_expire),
            scheduler=self.scheduler,
            tick_seconds=self.hold_timer_tick_seconds,
        )
        self._hold_timer = timer
        timer.start()

        Logger.base.info(
            f'🎫 [SEAT-DETAIL] Seat {seat.id} held as {hold.hold_id} for {hold.ttl_seconds}s'
        )
        self._notify()
        return hold

    def _handle_hold_expired(self, on_expire: Optional[Callable[[], None]]) -> None:
        if self.active_hold is not None:
            Logger.base.info(f'⌛ [SEAT-DETAIL] Hold {self.active_hold.hold_id} expired')
        self.active_hold = None
        self._notify()
        if on_expire is not None:
            on_expire()

    async def _cancel_orphaned_hold(self, hold_id: str) -> None:
        try:
            await self.seat_hold_command_repo.cancel_seat_hold(hold_id=hold_id)
        except CustomBaseError as e:
            # Server-side TTL still releases the seat
            Logger.base.warning(f'⚠️ [SEAT-DETAIL] Could not release orphaned hold {hold_id}: {e}')
        else:
            Logger.base.info(f'🗑️ [SEAT-DETAIL] Released orphaned hold {hold_id}')

    @Logger.io
    async def cancel_hold(self, hold_id: str) -> None:
        """Give the seat back; local state is cleared even when the backend call fails"""
        self.release_hold_timer()
        if self.active_hold is not None and self.active_hold.hold_id == hold_id:
            self.active_hold = None
        self._notify()
        await self.seat_hold_command_repo.cancel_seat_hold(hold_id=hold_id)

    def release_hold_timer(self) -> None:
        # Any hold request still in flight belongs to the released countdown
        self._hold_generation += 1
        if self._hold_timer is not None:
            timer, self._hold_timer = self._hold_timer, None
            timer.close()

    async def handle_dialog_close(self) -> None:
        self.release_hold_timer()
        self.active_hold = None
        self.selected_seat = None
        await self.refresh()

    def create_selection_dialog(
        self, seat: SeatEntity, *, close_on_expire: bool = False
    ) -> 'SeatSelectionDialog':
        from src.service.seat_hold.app.seat_selection_dialog import SeatSelectionDialog

        return SeatSelectionDialog(
            seat,
            concert=self.concert,
            workflow=self,
            cart_store=self.cart_store,
            close_on_expire=close_on_expire,
        )

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
