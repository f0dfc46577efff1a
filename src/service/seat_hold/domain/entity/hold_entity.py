from datetime import datetime, timezone
from typing import Optional

import attrs

from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


DEFAULT_HOLD_TTL_SECONDS = 600


@attrs.frozen
class HoldGrant:
    """Backend answer to a hold request; ttl_seconds is None when the server omits it"""

    hold_id: str
    seat_id: Optional[str] = None
    ttl_seconds: Optional[int] = None
    expires_at: Optional[datetime] = None


@attrs.frozen
class HoldEntity:
    """Client-side projection of a server-issued seat hold"""

    hold_id: str
    seat: SeatEntity
    concert: Optional[ConcertEntity] = None
    ttl_seconds: int = DEFAULT_HOLD_TTL_SECONDS
    expires_at: Optional[datetime] = None
    created_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_grant(
        cls,
        grant: HoldGrant,
        *,
        seat: SeatEntity,
        concert: Optional[ConcertEntity] = None,
        default_ttl_seconds: int = DEFAULT_HOLD_TTL_SECONDS,
    ) -> 'HoldEntity':
        return cls(
            hold_id=grant.hold_id,
            seat=seat,
            concert=concert,
            ttl_seconds=grant.ttl_seconds if grant.ttl_seconds is not None else default_ttl_seconds,
            expires_at=grant.expires_at,
        )
