"""
Seat Stream Client - live seat status subscription

Owns one event-stream connection per concert and keeps it alive with
exponential backoff. State changes follow ALLOWED_TRANSITIONS in
connection_state; every connection carries a generation number and handlers
from an older generation are discarded.
"""

from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional

import attrs
import httpx

from src.platform.exception.exceptions import (
    DomainError,
    InvalidStateTransitionError,
    StreamExhaustedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_utils import mask_sensitive
from src.platform.sse.sse_event import SseEvent
from src.platform.sse.sse_message_codec import SSEMessageCodec
from src.service.seat_hold.app.interface.i_event_source import IEventSource, IEventSourceFactory
from src.service.seat_hold.app.interface.i_scheduler import IScheduler, ITimerHandle
from src.service.seat_hold.app.interface.i_token_provider import ITokenProvider
from src.service.seat_hold.domain.entity.seat_update_event_entity import SeatUpdateEventEntity
from src.service.seat_hold.domain.enum.connection_state import ConnectionState, can_transition
from src.service.seat_hold.domain.enum.seat_status import SeatStatus


SEAT_UPDATE_EVENT = 'seat_update'
GENERIC_MESSAGE_EVENT = 'message'
STREAM_PATH = '/events/{concert_id}/seats/stream'


@attrs.define
class StreamCallbacks:
    on_seat_update: Optional[Callable[[str, SeatStatus], None]] = None
    on_connection_change: Optional[Callable[[ConnectionState], None]] = None
    on_error: Optional[Callable[[Exception], None]] = None


class SeatStreamClient:
    def __init__(
        self,
        *,
        concert_id: str,
        base_url: str,
        event_source_factory: IEventSourceFactory,
        scheduler: IScheduler,
        token_provider: Optional[ITokenProvider] = None,
        callbacks: Optional[StreamCallbacks] = None,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        max_attempts: int = 10,
        manual_reconnect_delay: float = 0.1,
    ) -> None:
        if not concert_id:
            raise DomainError('No concert id provided')
        self.concert_id = concert_id
        self.base_url = base_url.rstrip('/')
        # Dereferenced on every dispatch, replace freely while connected
        self.callbacks = callbacks or StreamCallbacks()
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_attempts = max_attempts
        self.manual_reconnect_delay = manual_reconnect_delay

        self._event_source_factory = event_source_factory
        self._scheduler = scheduler
        self._token_provider = token_provider

        self._state = ConnectionState.CLOSED
        self._reconnect_attempts = 0
        self._last_event: Optional[SeatUpdateEventEntity] = None
        self._source: Optional[IEventSource] = None
        self._pending_reconnect: Optional[ITimerHandle] = None
        self._generation = 0
        self._suppressed = False
        self._closed = False

    @property
    def connection_state(self) -> ConnectionState:
        return self._state

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def last_event(self) -> Optional[SeatUpdateEventEntity]:
        return self._last_event

    @property
    def is_closed(self) -> bool:
        return self._closed

    def update_callbacks(self, **changes: Optional[Callable[..., None]]) -> None:
        """Swap individual handlers, e.g. update_callbacks(on_seat_update=new_handler)"""
        self.callbacks = attrs.evolve(self.callbacks, **changes)

    def build_url(self) -> str:
        url = httpx.URL(self.base_url + STREAM_PATH.format(concert_id=self.concert_id))
        token = self._token_provider.get_token() if self._token_provider else None
        # EventSource transports cannot send headers, the token travels in the query
        if token:
            url = url.copy_merge_params({'token': token})
        return str(url)

    def backoff_delay(self, attempt: int) -> float:
        return min(self.base_delay * (2**attempt), self.max_delay)

    def connect(self) -> Callable[[], None]:
        """Open the subscription and return the teardown function"""
        if self._closed:
            raise DomainError('Seat stream client is closed')
        self._suppressed = False
        if self._state in (ConnectionState.CLOSED, ConnectionState.ERROR):
            self._open()
        return self.close

    def disconnect(self) -> None:
        """Tear down and suppress automatic reconnection until connect() or reconnect()"""
        self._suppressed = True
        self._teardown()
        self._transition(ConnectionState.CLOSED)

    def reconnect(self) -> None:
        """Drop the current connection and reopen shortly, with a fresh attempt budget"""
        if self._closed:
            return
        self._teardown()
        self._transition(ConnectionState.CLOSED)
        self._suppressed = False
        self._reconnect_attempts = 0
        Logger.base.info(f'🔄 [SEAT-STREAM] Manual reconnect for concert {self.concert_id}')
        self._pending_reconnect = self._scheduler.call_later(
            self.manual_reconnect_delay, self._open
        )

    def close(self) -> None:
        """Idempotent teardown; no callback fires afterwards"""
        if self._closed:
            return
        self.disconnect()
        self._closed = True
        Logger.base.info(f'🔌 [SEAT-STREAM] Closed stream for concert {self.concert_id}')

    def _open(self) -> None:
        self._pending_reconnect = None
        if self._closed or self._suppressed:
            return

        self._transition(ConnectionState.CONNECTING)
        self._generation += 1
        generation = self._generation
        url = self.build_url()
        Logger.base.info(f'📡 [SEAT-STREAM] Connecting to {mask_sensitive(url)}')

        source = self._event_source_factory(
            url,
            on_open=partial(self._handle_open, generation),
            on_event=partial(self._handle_event, generation),
            on_error=partial(self._handle_error, generation),
        )
        # A source that failed synchronously has already been superseded
        if generation != self._generation:
            source.close()
            return
        self._source = source

    def _teardown(self) -> None:
        self._generation += 1
        if self._pending_reconnect is not None:
            self._pending_reconnect.cancel()
            self._pending_reconnect = None
        if self._source is not None:
            source, self._source = self._source, None
            source.close()

    def _transition(self, target: ConnectionState) -> None:
        current = self._state
        if current is target:
            return
        if not can_transition(current, target):
            raise InvalidStateTransitionError(
                f'Illegal seat stream transition {current} -> {target}'
            )
        self._state = target
        Logger.base.debug(f'[SEAT-STREAM] {current} -> {target}')
        self._dispatch(self.callbacks.on_connection_change, target)

    def _handle_open(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._reconnect_attempts = 0
        self._transition(ConnectionState.CONNECTED)
        Logger.base.info(f'✅ [SEAT-STREAM] Connected to concert {self.concert_id}')

    def _handle_error(self, generation: int, error: Exception) -> None:
        if generation != self._generation:
            return
        self._teardown()
        self._transition(ConnectionState.RECONNECTING)

        if self._reconnect_attempts >= self.max_attempts:
            Logger.base.error(
                f'❌ [SEAT-STREAM] Giving up on concert {self.concert_id} '
                f'after {self._reconnect_attempts} attempts: {error}'
            )
            self._transition(ConnectionState.ERROR)
            self._dispatch(
                self.callbacks.on_error,
                StreamExhaustedError(
                    'Live seat updates are unavailable', attempts=self._reconnect_attempts
                ),
            )
            return

        delay = self.backoff_delay(self._reconnect_attempts)
        self._reconnect_attempts += 1
        Logger.base.warning(
            f'⚠️ [SEAT-STREAM] {error}; reconnect #{self._reconnect_attempts} in {delay}s'
        )
        self._pending_reconnect = self._scheduler.call_later(delay, self._open)

    def _handle_event(self, generation: int, event: SseEvent) -> None:
        if generation != self._generation:
            return
        if event.event not in (SEAT_UPDATE_EVENT, GENERIC_MESSAGE_EVENT):
            return

        try:
            payload = SSEMessageCodec.decode_payload(raw_data=event.data)
        except ValueError:
            Logger.base.debug(f'[SEAT-STREAM] Dropping malformed payload: {event.data[:100]}')
            return

        # Untyped messages count only when they look exactly like a seat update
        if not isinstance(payload, dict) or payload.get('seatId') is None:
            return
        status = SeatStatus.parse(payload.get('status'))
        if status is None:
            Logger.base.debug(f'[SEAT-STREAM] Dropping unknown status: {payload.get("status")}')
            return

        seat_id = str(payload['seatId'])
        timestamp = payload.get('timestamp')
        self._last_event = SeatUpdateEventEntity(
            seat_id=seat_id,
            status=status,
            received_at=datetime.now(timezone.utc),
            timestamp=str(timestamp) if timestamp is not None else None,
        )
        self._dispatch(self.callbacks.on_seat_update, seat_id, status)

    def _dispatch(self, callback: Optional[Callable[..., None]], *args: object) -> None:
        # A failing consumer must not take the connection down with it
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            Logger.base.exception(f'❌ [SEAT-STREAM] Callback {callback!r} raised: {e}')


def create_seat_stream(
    concert_id: str,
    callbacks: StreamCallbacks,
    *,
    base_url: str,
    event_source_factory: IEventSourceFactory,
    scheduler: IScheduler,
    token_provider: Optional[ITokenProvider] = None,
    **options: float,
) -> Callable[[], None]:
    """Open a seat subscription and return its teardown"""
    client = SeatStreamClient(
        concert_id=concert_id,
        base_url=base_url,
        event_source_factory=event_source_factory,
        scheduler=scheduler,
        token_provider=token_provider,
        callbacks=callbacks,
        **options,  # type: ignore[arg-type]
    )
    return client.connect()
