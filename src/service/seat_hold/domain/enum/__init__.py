"""Seat Hold Domain Enums"""

from src.service.seat_hold.domain.enum.connection_state import ConnectionState
from src.service.seat_hold.domain.enum.seat_status import SeatStatus

__all__ = ['ConnectionState', 'SeatStatus']
