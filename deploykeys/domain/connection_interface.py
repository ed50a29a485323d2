"""API connection interface (port) for talking HTTP to GitHub.

The deploy keys client only knows paths, methods and JSON bodies; the
connection owns base URLs, headers, decoding and status-to-error mapping.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class ApiResponse:
    """Decoded response of a single successful API request."""
    status: int
    body: Any
    headers: Mapping[str, str] = field(default_factory=dict)
    next_url: Optional[str] = None


class IApiConnection(ABC):
    """Abstract interface for issuing API requests."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> ApiResponse:
        """Issue one HTTP request.

        Args:
            method: HTTP method
            path: Path relative to the API root, or an absolute URL taken
                from a previous response's ``next_url``
            params: Query string parameters
            json: JSON request body

        Returns:
            The decoded response

        Raises:
            ApiError: For any non-2xx status
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
