"""GitHub REST API connection implemented with aiohttp."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
import aiohttp
from deploykeys.domain.connection_interface import ApiResponse, IApiConnection
from deploykeys.domain.errors import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitExceededError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from deploykeys.infrastructure.settings import ClientSettings


logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"

_ERRORS_BY_STATUS = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
}


def error_for_status(status: int, body: Any, headers: Mapping[str, str]) -> ApiError:
    """Map an error response to the matching ApiError subclass.

    Args:
        status: HTTP status code (>= 400)
        body: Decoded JSON body, or raw text when it was not JSON
        headers: Response headers

    Returns:
        The exception to raise
    """
    if isinstance(body, dict):
        message = body.get("message") or f"HTTP {status}"
        documentation_url = body.get("documentation_url")
        errors = body.get("errors")
    else:
        message = str(body) if body else f"HTTP {status}"
        documentation_url = None
        errors = None

    if status == 403 and headers.get("X-RateLimit-Remaining") == "0":
        reset_at = None
        reset = headers.get("X-RateLimit-Reset")
        if reset and reset.isdigit():
            reset_at = datetime.fromtimestamp(int(reset), tz=timezone.utc)
        return RateLimitExceededError(
            status, message, documentation_url, errors, reset_at=reset_at
        )

    error_class = _ERRORS_BY_STATUS.get(status, ApiError)
    return error_class(status, message, documentation_url, errors)


class AiohttpApiConnection(IApiConnection):
    """IApiConnection backed by a lazily created aiohttp session.

    One session is shared by every request made through this connection,
    so it can serve concurrent calls on the same event loop.
    """

    def __init__(self, settings: Optional[ClientSettings] = None):
        """Initialize the connection.

        Args:
            settings: Connection settings. If None, read from the environment.
        """
        self._settings = settings or ClientSettings.from_env()
        self._session: Optional[aiohttp.ClientSession] = None

        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": self._settings.user_agent,
        }
        # Add authorization header if token is available
        if self._settings.token:
            self._headers["Authorization"] = f"Bearer {self._settings.token}"

    async def _init_session(self) -> aiohttp.ClientSession:
        """Initialize the HTTP session (lazy initialization)."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._headers,
                timeout=aiohttp.ClientTimeout(total=self._settings.timeout_seconds)
            )
        return self._session

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._settings.base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> ApiResponse:
        session = await self._init_session()
        url = self._url(path)
        logger.debug(f"{method} {url} params={params}")

        async with session.request(method, url, params=params, json=json) as response:
            headers = response.headers
            body = await _read_body(response)

            remaining = headers.get("X-RateLimit-Remaining")
            if remaining is not None:
                logger.debug(f"Rate limit remaining: {remaining}")

            if response.status >= 400:
                error = error_for_status(response.status, body, headers)
                logger.warning(f"{method} {url} failed: {error}")
                raise error

            next_link = response.links.get("next", {}).get("url")
            return ApiResponse(
                status=response.status,
                body=body,
                headers=headers,
                next_url=str(next_link) if next_link is not None else None
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None


async def _read_body(response: aiohttp.ClientResponse) -> Any:
    """Decode a JSON body; empty bodies give None, non-JSON bodies their text."""
    try:
        return await response.json(content_type=None)
    except ValueError:
        return await response.text()
