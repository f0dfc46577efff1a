from typing import Optional

import attrs


@attrs.frozen
class SseEvent:
    """One dispatched text/event-stream event"""

    data: str
    event: str = 'message'
    id: Optional[str] = None
    retry: Optional[int] = None
