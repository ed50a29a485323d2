"""Deploy keys client interface (port).

Single-result operations return an awaitable that starts its request only
when awaited. Listings return an async iterable that fetches pages as they
are consumed.
"""
from abc import ABC, abstractmethod
from typing import Awaitable, AsyncIterable, Optional
from deploykeys.domain.models import ApiOptions, DeployKey, NewDeployKey, RepositoryReference


class IDeployKeysClient(ABC):
    """Abstract interface for the Repository Deploy Keys API.

    See https://docs.github.com/en/rest/deploy-keys/deploy-keys
    """

    @abstractmethod
    def get(self, repository: RepositoryReference, deploy_key_id: int) -> Awaitable[DeployKey]:
        """Get a single deploy key by id for a repository."""
        pass

    @abstractmethod
    def get_all(
        self,
        repository: RepositoryReference,
        options: Optional[ApiOptions] = None
    ) -> AsyncIterable[DeployKey]:
        """Get all deploy keys for a repository.

        Args:
            repository: Owner/name or id of the repository
            options: Paging bounds; every page is read when omitted

        Yields:
            DeployKey entities in the order the server returns them
        """
        pass

    @abstractmethod
    def create(self, repository: RepositoryReference, new_deploy_key: NewDeployKey) -> Awaitable[DeployKey]:
        """Create a new deploy key for a repository."""
        pass

    @abstractmethod
    def delete(self, repository: RepositoryReference, deploy_key_id: int) -> Awaitable[None]:
        """Delete a deploy key from a repository."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
