from typing import Optional, Protocol


class ITokenProvider(Protocol):
    """Read-only view of the current session token"""

    def get_token(self) -> Optional[str]: ...
