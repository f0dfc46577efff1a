"""
Seat Selection Dialog - confirm a hold on one seat

Holds the seat through the owning workflow, shows the countdown that guards
the hold and mirrors the hold into the cart. Errors stay inside the dialog;
the seat list underneath is never touched on failure.
"""

import asyncio
from typing import Optional

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    HoldSupersededError,
)
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_cart_store import ICartStore
from src.service.seat_hold.app.interface.i_hold_workflow import IHoldWorkflow
from src.service.seat_hold.domain.entity.concert_entity import ConcertEntity
from src.service.seat_hold.domain.entity.hold_entity import HoldEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


ALREADY_RESERVED_MESSAGE = 'This seat has already been reserved. Please choose another one.'
RESERVE_FAILED_MESSAGE = 'Failed to reserve the seat.'
HOLD_EXPIRED_MESSAGE = 'Your reservation has expired. Please choose another seat.'


class SeatSelectionDialog:
    def __init__(
        self,
        seat: SeatEntity,
        *,
        workflow: IHoldWorkflow,
        concert: Optional[ConcertEntity] = None,
        cart_store: Optional[ICartStore] = None,
        close_on_expire: bool = False,
    ) -> None:
        self.seat = seat
        self.concert = concert
        self.workflow = workflow
        self.cart_store = cart_store
        self.close_on_expire = close_on_expire

        self.is_open = True
        self.is_submitting = False
        self.confirmed = False
        self.expired = False
        self.error: Optional[str] = None
        self.hold: Optional[HoldEntity] = None
        self.pending_close: Optional[asyncio.Task[None]] = None

    @property
    def hold_id(self) -> Optional[str]:
        return self.hold.hold_id if self.hold else None

    @property
    def time_left(self) -> Optional[int]:
        timer = self.workflow.hold_timer
        return timer.time_left if timer and self.hold else None

    @property
    def formatted_time(self) -> Optional[str]:
        timer = self.workflow.hold_timer
        return timer.formatted_time if timer and self.hold else None

    @property
    def progress_percentage(self) -> float:
        timer = self.workflow.hold_timer
        return timer.progress_percentage if timer and self.hold else 0.0

    async def confirm(self) -> Optional[HoldEntity]:
        """Hold the seat; returns None and sets error when the backend refuses"""
        if not self.is_open or self.is_submitting or self.hold is not None:
            return self.hold

        self.is_submitting = True
        self.error = None
        self.expired = False
        try:
            hold = await self.workflow.confirm_hold(self.seat, on_expire=self._handle_expire)
        except HoldSupersededError as e:
            Logger.base.info(f'[SEAT-DIALOG] {e}')
            return None
        except CustomBaseError as e:
            self.error = e.upstream_message or (
                ALREADY_RESERVED_MESSAGE if isinstance(e, ConflictError) else RESERVE_FAILED_MESSAGE
            )
            Logger.base.warning(f'⚠️ [SEAT-DIALOG] Hold on seat {self.seat.id} refused: {e}')
            return None
        except Exception as e:
            Logger.base.exception(f'❌ [SEAT-DIALOG] Hold on seat {self.seat.id} failed: {e}')
            self.error = RESERVE_FAILED_MESSAGE
            return None
        finally:
            self.is_submitting = False

        if not self.is_open:
            return None
        self.hold = hold
        self.confirmed = True
        if self.cart_store is not None and self.concert is not None:
            self.cart_store.add_item(
                hold_id=hold.hold_id,
                seat=hold.seat,
                concert=self.concert,
                ttl_seconds=hold.ttl_seconds,
            )
        return hold

    def _handle_expire(self) -> None:
        if self.hold is not None and self.cart_store is not None:
            self.cart_store.remove_item(self.hold.hold_id)
        self.hold = None
        self.confirmed = False
        self.expired = True
        self.error = HOLD_EXPIRED_MESSAGE

        if self.close_on_expire and self.is_open:
            self.pending_close = asyncio.get_running_loop().create_task(self.close())

    def change_seat(self, seat: SeatEntity) -> None:
        """Start over for another seat; an existing countdown is discarded"""
        self.workflow.release_hold_timer()
        self.seat = seat
        self.hold = None
        self.confirmed = False
        self.expired = False
        self.error = None

    async def cancel(self) -> None:
        """Give up the current hold, if any, and close"""
        hold, self.hold = self.hold, None
        self.confirmed = False
        if hold is not None:
            if self.cart_store is not None:
                self.cart_store.remove_item(hold.hold_id)
            try:
                await self.workflow.cancel_hold(hold.hold_id)
            except CustomBaseError as e:
                # The refresh on close shows whatever the backend still holds
                Logger.base.warning(f'⚠️ [SEAT-DIALOG] Cancelling hold {hold.hold_id} failed: {e}')
        await self.close()

    async def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.workflow.release_hold_timer()
        await self.workflow.handle_dialog_close()
