"""Connection status badge shown next to the live seat map"""

from typing import Final, Mapping

import attrs

from src.service.seat_hold.domain.enum.connection_state import ConnectionState


@attrs.frozen
class ConnectionBadge:
    label: str
    icon: str
    animate: bool = False
    show_reconnect: bool = False


_BADGES: Final[Mapping[ConnectionState, ConnectionBadge]] = {
    ConnectionState.CONNECTED: ConnectionBadge(label='Live', icon='🟢'),
    ConnectionState.CONNECTING: ConnectionBadge(label='Connecting...', icon='🟡', animate=True),
    ConnectionState.RECONNECTING: ConnectionBadge(label='Reconnecting', icon='🟠', animate=True),
    ConnectionState.ERROR: ConnectionBadge(label='Offline', icon='🔴', show_reconnect=True),
    ConnectionState.CLOSED: ConnectionBadge(label='Not connected', icon='⚪'),
}


def connection_badge(state: ConnectionState) -> ConnectionBadge:
    return _BADGES[state]
