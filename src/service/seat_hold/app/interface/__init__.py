"""Application layer interfaces (Ports)"""

from src.service.seat_hold.app.interface.i_cart_store import ICartStore
from src.service.seat_hold.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.seat_hold.app.interface.i_event_source import (
    IEventSource,
    IEventSourceFactory,
    SseEvent,
)
from src.service.seat_hold.app.interface.i_hold_workflow import IHoldWorkflow
from src.service.seat_hold.app.interface.i_scheduler import IScheduler, ITimerHandle
from src.service.seat_hold.app.interface.i_seat_hold_command_repo import ISeatHoldCommandRepo
from src.service.seat_hold.app.interface.i_token_provider import ITokenProvider

__all__ = [
    'ICartStore',
    'IConcertQueryRepo',
    'IEventSource',
    'IEventSourceFactory',
    'IHoldWorkflow',
    'IScheduler',
    'ISeatHoldCommandRepo',
    'ITimerHandle',
    'ITokenProvider',
    'SseEvent',
]
