"""Client configuration read from environment variables."""
import os
from dataclasses import dataclass
from typing import Optional
from deploykeys.domain.errors import ValidationError


DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "deploykeys-client"


@dataclass(frozen=True)
class ClientSettings:
    """Settings for the GitHub API connection."""
    token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> 'ClientSettings':
        """Build settings from GITHUB_* environment variables."""
        raw_timeout = os.getenv("GITHUB_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValidationError(f"GITHUB_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ValidationError(f"GITHUB_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(
            token=os.getenv("GITHUB_TOKEN") or None,
            base_url=os.getenv("GITHUB_API_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=timeout,
            user_agent=os.getenv("GITHUB_USER_AGENT", DEFAULT_USER_AGENT),
        )
