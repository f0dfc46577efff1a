"""
Event Source Interface

One long-lived server-to-client notification channel (text/event-stream).
Handlers are invoked on the event loop; none may fire after close().
"""

from typing import Callable, Protocol

from src.platform.sse.sse_event import SseEvent


class IEventSource(Protocol):
    def close(self) -> None: ...


class IEventSourceFactory(Protocol):
    def __call__(
        self,
        url: str,
        *,
        on_open: Callable[[], None],
        on_event: Callable[[SseEvent], None],
        on_error: Callable[[Exception], None],
    ) -> IEventSource:
        """
        Open a subscription to url

        Args:
            url: Fully built stream URL (auth token already in the query string)
            on_open: Called once the server accepted the subscription
            on_event: Called for every dispatched event
            on_error: Called on transport failure or when the server ends the stream
        """
        ...
