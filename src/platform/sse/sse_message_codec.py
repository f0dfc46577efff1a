"""
SSE Message Codec (client side)

Parses text/event-stream framing line by line and decodes event payloads.
Payloads are JSON text, or MessagePack when the server sent them as
'binary:<base64>' data lines.
"""

import base64
import binascii
from typing import Any, List, Optional

import msgpack
import orjson

from src.platform.sse.sse_event import SseEvent


DEFAULT_EVENT_TYPE = 'message'


class SSEMessageCodec:
    BINARY_PREFIX = 'binary:'

    @staticmethod
    def decode_payload(*, raw_data: str) -> Any:
        """Decode one event's data field

        Raises:
            ValueError: Payload is neither valid JSON nor valid base64 MessagePack
        """
        try:
            if raw_data.startswith(SSEMessageCodec.BINARY_PREFIX):
                packed = base64.b64decode(raw_data[len(SSEMessageCodec.BINARY_PREFIX) :], validate=True)
                return msgpack.unpackb(packed, raw=False)
            return orjson.loads(raw_data)
        except (orjson.JSONDecodeError, binascii.Error, msgpack.UnpackException, ValueError) as e:
            raise ValueError(f'Failed to decode message: {e}') from e


class SSELineParser:
    """Incremental event-stream parser; feed() returns an event on each blank line"""

    def __init__(self) -> None:
        self._event_type: Optional[str] = None
        self._data_lines: List[str] = []
        self._last_event_id: Optional[str] = None
        self._retry: Optional[int] = None

    def feed(self, line: str) -> Optional[SseEvent]:
        line = line.rstrip('\r\n')

        if not line:
            return self._dispatch()

        # Comment lines are used as keep-alives
        if line.startswith(':'):
            return None

        field, _, value = line.partition(':')
        if value.startswith(' '):
            value = value[1:]

        if field == 'event':
            self._event_type = value
        elif field == 'data':
            self._data_lines.append(value)
        elif field == 'id':
            self._last_event_id = value or None
        elif field == 'retry' and value.isdigit():
            self._retry = int(value)
        return None

    def _dispatch(self) -> Optional[SseEvent]:
        if not self._data_lines:
            self._event_type = None
            return None

        event = SseEvent(
            data='\n'.join(self._data_lines),
            event=self._event_type or DEFAULT_EVENT_TYPE,
            id=self._last_event_id,
            retry=self._retry,
        )
        self._event_type = None
        self._data_lines = []
        self._retry = None
        return event
