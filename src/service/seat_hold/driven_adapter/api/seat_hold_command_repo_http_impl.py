from pydantic import ValidationError

from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_seat_hold_command_repo import ISeatHoldCommandRepo
from src.service.seat_hold.domain.entity.hold_entity import HoldGrant
from src.service.seat_hold.driven_adapter.api.api_schema import SeatHoldRequest, SeatHoldResponse
from src.service.seat_hold.driven_adapter.api.base_api_client import BaseApiClient


class SeatHoldCommandRepoHttpImpl(BaseApiClient, ISeatHoldCommandRepo):
    @Logger.io
    async def create_seat_hold(self, *, seat_id: str, user_id: str) -> HoldGrant:
        path = f'/seats/{seat_id}/hold'
        body = await self._request(
            'POST', path, json=SeatHoldRequest(user_id=user_id).model_dump(by_alias=True)
        )
        try:
            schema = SeatHoldResponse.model_validate(body)
        except ValidationError as e:
            raise self._malformed(path, e) from e

        Logger.base.info(f'🎫 [API] Hold {schema.hold_id} granted for seat {seat_id}')
        return HoldGrant(
            hold_id=schema.hold_id,
            seat_id=schema.seat_id or seat_id,
            ttl_seconds=schema.ttl_seconds,
            expires_at=schema.expires_at,
        )

    @Logger.io
    async def cancel_seat_hold(self, *, hold_id: str) -> None:
        await self._request('DELETE', f'/reservations/{hold_id}')
        Logger.base.info(f'🗑️ [API] Hold {hold_id} cancelled')
