"""Wire models for the concert REST API (camelCase JSON)"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra='ignore',
    )


class ConcertResponse(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': '1',
                'name': 'Summer Night Symphony',
                'date': '2026-07-10T19:30:00',
                'venue': 'City Hall',
                'minPrice': 49.0,
                'maxPrice': 149.0,
            }
        }
    )

    id: str
    name: str
    date: Optional[datetime] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    total_seats: Optional[int] = None
    available_seats: Optional[int] = None


class SeatResponse(CamelModel):
    id: str
    row: str
    number: str
    price: Decimal = Field(ge=0)
    status: str
    block: Optional[str] = None
    category: Optional[str] = None


class SeatListResponse(CamelModel):
    seats: List[SeatResponse] = []


class SeatHoldRequest(CamelModel):
    user_id: str


class SeatHoldResponse(CamelModel):
    hold_id: str
    seat_id: Optional[str] = None
    ttl_seconds: Optional[int] = None
    expires_at: Optional[datetime] = None


class ErrorResponse(CamelModel):
    message: Optional[str] = None
    code: Optional[str] = None
