from typing import Optional

from pydantic import SecretStr


class SessionTokenProvider:
    """Holds the token of the signed-in session; None while signed out"""

    def __init__(self, token: Optional[SecretStr | str] = None) -> None:
        self._token: Optional[SecretStr] = None
        self.set_token(token)

    def set_token(self, token: Optional[SecretStr | str]) -> None:
        if isinstance(token, str):
            token = SecretStr(token) if token else None
        self._token = token

    def clear(self) -> None:
        self._token = None

    def get_token(self) -> Optional[str]:
        return self._token.get_secret_value() if self._token else None
