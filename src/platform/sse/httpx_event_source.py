"""
httpx Event Source

Consumes a text/event-stream response on a background task and forwards
parsed events to the owner's handlers. The server closing the stream counts
as a transport error so the owner can decide whether to reconnect.
"""

import asyncio
import contextlib
from typing import Callable, Optional

import httpx

from src.platform.exception.exceptions import TransportError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_utils import mask_sensitive
from src.platform.sse.sse_event import SseEvent
from src.platform.sse.sse_message_codec import SSELineParser


SSE_HEADERS = {'Accept': 'text/event-stream', 'Cache-Control': 'no-cache'}


class HttpxEventSource:
    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        url: str,
        on_open: Callable[[], None],
        on_event: Callable[[SseEvent], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        self._client = client
        self._url = url
        self._on_open = on_open
        self._on_event = on_event
        self._on_error = on_error
        self._closed = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def closed(self) -> bool:
        return self._closed

    async def _run(self) -> None:
        parser = SSELineParser()
        try:
            async with self._client.stream('GET', self._url, headers=SSE_HEADERS) as response:
                if response.status_code != 200:
                    raise TransportError(f'Seat stream rejected with HTTP {response.status_code}')
                if self._closed:
                    return
                self._on_open()

                async for line in response.aiter_lines():
                    if self._closed:
                        return
                    event = parser.feed(line)
                    if event is not None:
                        self._on_event(event)

            if not self._closed:
                self._on_error(TransportError('Seat stream ended by server'))
        except TransportError as e:
            self._fail(e)
        except httpx.HTTPError as e:
            self._fail(TransportError(f'Seat stream transport failure: {e}'))
        except Exception as e:
            # Nobody awaits the reader task
            Logger.base.exception(f'❌ [SSE] Handler failed on {mask_sensitive(self._url)}: {e}')
            self._fail(TransportError(f'Seat stream handler failure: {e}'))

    def _fail(self, error: TransportError) -> None:
        if self._closed:
            return
        Logger.base.warning(f'⚠️ [SSE] {mask_sensitive(self._url)}: {error}')
        self._on_error(error)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._task.cancel()

    async def wait_closed(self) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            await self._task


class HttpxEventSourceFactory:
    """Opens HttpxEventSource instances sharing one AsyncClient"""

    def __init__(
        self, *, client: Optional[httpx.AsyncClient] = None, connect_timeout: float = 10.0
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._connect_timeout = connect_timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # Streams stay open indefinitely, only connecting is time-boxed
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(None, connect=self._connect_timeout)
            )
        return self._client

    def __call__(
        self,
        url: str,
        *,
        on_open: Callable[[], None],
        on_event: Callable[[SseEvent], None],
        on_error: Callable[[Exception], None],
    ) -> HttpxEventSource:
        return HttpxEventSource(
            client=self._get_client(),
            url=url,
            on_open=on_open,
            on_event=on_event,
            on_error=on_error,
        )

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
