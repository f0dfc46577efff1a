from typing import Any, List

from pydantic import ValidationError

from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.seat_entity import DEFAULT_CATEGORY, SeatEntity
from src.service.seat_hold.domain.enum.seat_status import SeatStatus
from src.service.seat_hold.driven_adapter.api.api_schema import (
    ConcertResponse,
    SeatListResponse,
    SeatResponse,
)
from src.service.seat_hold.driven_adapter.api.base_api_client import BaseApiClient


class ConcertQueryRepoHttpImpl(BaseApiClient, IConcertQueryRepo):
    @staticmethod
    def _to_concert_entity(schema: ConcertResponse) -> ConcertEntity:
        return ConcertEntity(
            id=schema.id,
            name=schema.name,
            date=schema.date,
            venue=schema.venue,
            description=schema.description,
            min_price=schema.min_price,
            max_price=schema.max_price,
            total_seats=schema.total_seats,
            available_seats=schema.available_seats,
        )

    @staticmethod
    def _to_seat_entity(schema: SeatResponse, status: SeatStatus) -> SeatEntity:
        return SeatEntity(
            id=schema.id,
            row=schema.row,
            number=schema.number,
            price=schema.price,
            status=status,
            block=schema.block,
            category=schema.category or DEFAULT_CATEGORY,
        )

    @Logger.io
    async def fetch_concert_by_id(self, concert_id: str) -> ConcertEntity:
        path = f'/concerts/{concert_id}'
        body = await self._request('GET', path)
        try:
            return self._to_concert_entity(ConcertResponse.model_validate(body))
        except ValidationError as e:
            raise self._malformed(path, e) from e

    @Logger.io
    async def fetch_concert_seats(self, concert_id: str) -> List[SeatEntity]:
        path = f'/events/{concert_id}/seats'
        body: Any = await self._request('GET', path)
        # Older backends answer with a bare list instead of {"seats": [...]}
        if isinstance(body, list):
            body = {'seats': body}
        try:
            seat_list = SeatListResponse.model_validate(body or {})
        except ValidationError as e:
            raise self._malformed(path, e) from e

        seats = []
        for seat in seat_list.seats:
            status = SeatStatus.parse(seat.status)
            if status is None:
                Logger.base.warning(f'⚠️ [API] Skipping seat {seat.id} with status {seat.status!r}')
                continue
            seats.append(self._to_seat_entity(seat, status))
        return seats
