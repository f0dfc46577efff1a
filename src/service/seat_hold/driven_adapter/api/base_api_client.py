"""
Base API Client

Shared httpx plumbing for the REST adapters: auth header, timeouts, and the
mapping from HTTP failures onto the platform exception hierarchy.
"""

from typing import Any, Optional

import httpx
import orjson
from pydantic import ValidationError

from src.platform.exception.exceptions import (
    ConflictError,
    NotFoundError,
    TransportError,
    UpstreamError,
)
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_token_provider import ITokenProvider
from src.service.seat_hold.driven_adapter.api.api_schema import ErrorResponse


class BaseApiClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 10.0,
        token_provider: Optional[ITokenProvider] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.token_provider = token_provider
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {'Accept': 'application/json'}
        token = self.token_provider.get_token() if self.token_provider else None
        if token:
            headers['Authorization'] = f'Bearer {token}'
        return headers

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        """
        Send a request and return the decoded JSON body (None for empty bodies)

        Raises:
            NotFoundError: HTTP 404
            ConflictError: HTTP 409
            UpstreamError: Any other non-2xx status or an undecodable body
            TransportError: Network failure or timeout
        """
        url = f'{self.base_url}{path}'
        try:
            response = await self._client.request(method, url, json=json, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(f'{method} {path} failed: {e}') from e

        if response.is_success:
            if not response.content:
                return None
            try:
                return orjson.loads(response.content)
            except orjson.JSONDecodeError as e:
                raise UpstreamError(
                    f'{method} {path} returned invalid JSON', response.status_code
                ) from e

        upstream_message = self._extract_message(response)
        message = f'{method} {path} -> HTTP {response.status_code}'
        if response.status_code == 404:
            raise NotFoundError(message, upstream_message=upstream_message)
        if response.status_code == 409:
            raise ConflictError(message, upstream_message=upstream_message)
        raise UpstreamError(message, response.status_code, upstream_message=upstream_message)

    @staticmethod
    def _extract_message(response: httpx.Response) -> Optional[str]:
        try:
            return ErrorResponse.model_validate(orjson.loads(response.content)).message
        except (orjson.JSONDecodeError, ValidationError, TypeError):
            return None

    @staticmethod
    def _malformed(path: str, error: ValidationError) -> UpstreamError:
        Logger.base.warning(f'⚠️ [API] Malformed response from {path}: {error}')
        return UpstreamError(f'Malformed response from {path}', 502)

    async def aclose(self) -> None:
        await self._client.aclose()
