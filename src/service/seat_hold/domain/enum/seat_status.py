"""
Seat Status Enum - Domain Value Object

Server-authoritative status of a single seat. The client only ever learns
about transitions from hold creation, stream updates or a refresh.
"""

from enum import StrEnum
from typing import Optional


class SeatStatus(StrEnum):
    AVAILABLE = 'AVAILABLE'
    HELD = 'HELD'
    SOLD = 'SOLD'

    @classmethod
    def parse(cls, raw: object) -> Optional['SeatStatus']:
        """Case-insensitive lookup, None for anything that is not a known status"""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None
