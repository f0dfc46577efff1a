"""
Hold Workflow Interface

What the seat selection dialog needs from its owning view: create a hold,
expose the countdown that guards it, and reconcile when the dialog closes.
"""

from typing import TYPE_CHECKING, Callable, Optional, Protocol

from src.service.seat_hold.domain.entity.hold_entity import HoldEntity
from src.service.seat_hold.domain.entity.seat_entity import SeatEntity


if TYPE_CHECKING:
    from src.service.seat_hold.app.hold_timer import HoldTimer


class IHoldWorkflow(Protocol):
    @property
    def hold_timer(self) -> Optional['HoldTimer']: ...

    async def confirm_hold(
        self, seat: SeatEntity, *, on_expire: Optional[Callable[[], None]] = None
    ) -> HoldEntity:
        """
        Hold the seat and start its countdown

        Raises:
            ConflictError: Seat is already held or sold
            HoldSupersededError: The countdown was released while the request was in flight
            CustomBaseError: Any other backend or transport failure
        """
        ...

    async def cancel_hold(self, hold_id: str) -> None:
        """
        Release the hold on the backend and drop its countdown

        Raises:
            CustomBaseError: Backend refused or was unreachable
        """
        ...

    def release_hold_timer(self) -> None:
        """Stop and discard the current countdown without touching seat state"""
        ...

    async def handle_dialog_close(self) -> None: ...
