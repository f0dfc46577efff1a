"""
Concert Query Repository Interface

Read side of the backend REST API used to build the seat detail view.
"""

from typing import List, Protocol

from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


class IConcertQueryRepo(Protocol):
    async def fetch_concert_by_id(self, concert_id: str) -> ConcertEntity:
        """
        Raises:
            NotFoundError: Concert does not exist
            UpstreamError / TransportError: Any other failure
        """
        ...

    async def fetch_concert_seats(self, concert_id: str) -> List[SeatEntity]: ...
