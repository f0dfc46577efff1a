"""
Live Seat Monitor - follow one concert's seat map from the terminal

Usage:
    PYTHONPATH=$PWD python -m src.service.seat_hold.driving_adapter.cli.seat_monitor <concert_id>

SIGHUP triggers a manual reconnect of the live stream; SIGINT/SIGTERM stop.
"""

import argparse
import signal
from typing import Optional, Sequence

import anyio

from src.platform.config.di import cleanup, container
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.seat_detail_controller import SeatDetailController
from src.service.seat_hold.domain.value_object.seat_availability import (
    availability_message,
    availability_percentage,
    availability_status,
)
from src.service.seat_hold.driving_adapter.presenter.connection_status_badge import (
    connection_badge,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='seat-monitor', description='Print live seat availability for a concert'
    )
    parser.add_argument('concert_id', help='Concert identifier')
    return parser


def render(controller: SeatDetailController) -> str:
    badge = connection_badge(controller.connection_status)
    if controller.error:
        return f'{badge.icon} {badge.label} | ❌ {controller.error}'
    if controller.loading:
        return f'{badge.icon} {badge.label} | Loading...'

    availability = controller.availability
    percentage = availability_percentage(availability.available, availability.total)
    status = availability_status(availability.available, availability.total)
    line = (
        f'{badge.icon} {badge.label} | '
        f'{availability.available}/{availability.total} available ({percentage}%, {status}) '
        f'held={availability.held} sold={availability.sold} | '
        f'{availability_message(availability.available)}'
    )
    if badge.show_reconnect:
        line += ' | send SIGHUP (kill -HUP <pid>) to reconnect'
    return line


def handle_signal(controller: SeatDetailController, signum: int) -> bool:
    """Returns False once the monitor should stop"""
    if signum == signal.SIGHUP:
        Logger.base.info('🔄 [SEAT-MONITOR] Manual reconnect requested')
        controller.reconnect_stream()
        return True
    Logger.base.info(f'🛑 [SEAT-MONITOR] Received signal {signum}')
    return False


async def run(concert_id: str) -> None:
    controller = container.seat_detail_controller()
    last_line: Optional[str] = None

    def on_change() -> None:
        nonlocal last_line
        line = render(controller)
        if line != last_line:
            print(line, flush=True)
            last_line = line

    controller.on_change = on_change
    try:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM, signal.SIGHUP) as signals:
            await controller.mount(concert_id)
            async for signum in signals:
                if not handle_signal(controller, signum):
                    break
    finally:
        controller.unmount()
        await cleanup()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    Logger.base.info(f'🚀 [SEAT-MONITOR] Watching concert {args.concert_id}')
    anyio.run(run, args.concert_id)


if __name__ == '__main__':
    main()
