"""
Connection State Enum - seat event stream lifecycle

    CLOSED → CONNECTING → CONNECTED ⇄ RECONNECTING → (CONNECTED | ERROR)
    any state → CLOSED via explicit teardown
"""

from enum import StrEnum
from typing import Final, Mapping


class ConnectionState(StrEnum):
    CONNECTING = 'CONNECTING'
    CONNECTED = 'CONNECTED'
    RECONNECTING = 'RECONNECTING'
    ERROR = 'ERROR'
    CLOSED = 'CLOSED'


ALLOWED_TRANSITIONS: Final[Mapping[ConnectionState, frozenset[ConnectionState]]] = {
    ConnectionState.CLOSED: frozenset({ConnectionState.CONNECTING}),
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.CONNECTED, ConnectionState.RECONNECTING, ConnectionState.CLOSED}
    ),
    ConnectionState.CONNECTED: frozenset({ConnectionState.RECONNECTING, ConnectionState.CLOSED}),
    # A scheduled reconnect re-enters CONNECTING before the next open succeeds
    ConnectionState.RECONNECTING: frozenset(
        {
            ConnectionState.CONNECTING,
            ConnectionState.CONNECTED,
            ConnectionState.ERROR,
            ConnectionState.CLOSED,
        }
    ),
    ConnectionState.ERROR: frozenset({ConnectionState.CONNECTING, ConnectionState.CLOSED}),
}


def can_transition(current: ConnectionState, target: ConnectionState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]
