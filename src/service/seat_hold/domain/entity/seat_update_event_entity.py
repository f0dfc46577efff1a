from datetime import datetime
from typing import Optional

import attrs

from src.service.seat_hold.domain.enum.seat_status import SeatStatus


@attrs.frozen
class SeatUpdateEventEntity:
    """One seat status change as delivered by the event stream"""

    seat_id: str
    status: SeatStatus
    received_at: datetime
    timestamp: Optional[str] = None
