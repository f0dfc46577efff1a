"""
Seat Hold Command Repository Interface

Hold creation and release. TTL enforcement lives server-side.
"""

from typing import Protocol

from src.service.seat_hold.domain.entity.hold_entity import HoldGrant


class ISeatHoldCommandRepo(Protocol):
    async def create_seat_hold(self, *, seat_id: str, user_id: str) -> HoldGrant:
        """
        Raises:
            ConflictError: Seat is already held or sold
            NotFoundError: Seat does not exist
            UpstreamError / TransportError: Any other failure
        """
        ...

    async def cancel_seat_hold(self, *, hold_id: str) -> None: ...
