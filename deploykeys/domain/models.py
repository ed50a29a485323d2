"""Domain models representing deploy keys and the repositories they belong to."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Union

from deploykeys.domain.errors import ValidationError


_PATH_RESERVED = ("/", "?", "#")


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp (``2024-01-01T12:00:00Z``)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _require_text(value: Any, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required and must be a non-empty string")


def _require_positive(value: Any, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class DeployKey:
    """Immutable snapshot of a deploy key as returned by the API.

    Deploy keys carry no ``updated_at``; ``last_used`` is the only later
    timestamp the API reports.
    """
    id: int
    key: str
    title: str
    verified: bool
    read_only: bool
    created_at: Optional[datetime]
    url: Optional[str] = None
    last_used: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'DeployKey':
        """Build a DeployKey from a decoded API response object."""
        return cls(
            id=data["id"],
            key=data["key"],
            title=data.get("title") or "",
            verified=bool(data.get("verified", False)),
            read_only=bool(data.get("read_only", False)),
            created_at=_parse_timestamp(data.get("created_at")),
            url=data.get("url"),
            last_used=_parse_timestamp(data.get("last_used")),
        )


@dataclass(frozen=True)
class NewDeployKey:
    """Payload for registering a new deploy key on a repository."""
    title: str
    key: str
    read_only: Optional[bool] = None

    def validate(self) -> None:
        _require_text(self.title, "title")
        _require_text(self.key, "key")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"title": self.title, "key": self.key}
        if self.read_only is not None:
            payload["read_only"] = self.read_only
        return payload


@dataclass(frozen=True)
class RepositoryName:
    """Repository addressed by its owner login and name."""
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """Returns the full repository name (owner/name)."""
        return f"{self.owner}/{self.name}"

    def validate(self) -> None:
        for field_name in ("owner", "name"):
            value = getattr(self, field_name)
            _require_text(value, field_name)
            # these would change which endpoint the path points at
            if any(char in value for char in _PATH_RESERVED):
                raise ValidationError(f"{field_name} must not contain /, ? or #, got {value!r}")


@dataclass(frozen=True)
class RepositoryId:
    """Repository addressed by its numeric id."""
    repository_id: int

    def validate(self) -> None:
        _require_positive(self.repository_id, "repository_id")


RepositoryReference = Union[RepositoryName, RepositoryId]


def parse_repository(value: str) -> RepositoryReference:
    """Parse ``owner/name`` or a numeric id into a repository reference.

    Args:
        value: Text as typed on the command line

    Returns:
        A validated RepositoryName or RepositoryId
    """
    value = value.strip()
    if value.isdigit():
        reference: RepositoryReference = RepositoryId(int(value))
    elif value.count("/") == 1:
        owner, name = value.split("/", 1)
        reference = RepositoryName(owner, name)
    else:
        raise ValidationError(f"Expected owner/name or a repository id, got {value!r}")
    reference.validate()
    return reference


@dataclass(frozen=True)
class ApiOptions:
    """Paging controls for list operations.

    ``page_size`` maps to ``per_page``, ``start_page`` to ``page`` and
    ``page_count`` caps how many pages are fetched. Unset fields leave the
    server defaults in place; with no ``page_count`` every page is read.
    """
    page_size: Optional[int] = None
    start_page: Optional[int] = None
    page_count: Optional[int] = None

    NONE: ClassVar['ApiOptions']

    def validate(self) -> None:
        for field_name in ("page_size", "start_page", "page_count"):
            value = getattr(self, field_name)
            if value is not None:
                _require_positive(value, field_name)

    def to_params(self) -> Dict[str, int]:
        params = {}
        if self.page_size is not None:
            params["per_page"] = self.page_size
        if self.start_page is not None:
            params["page"] = self.start_page
        return params


ApiOptions.NONE = ApiOptions()
