"""Deploy keys client translating operations into API requests."""
import logging
from typing import AsyncIterator, Optional
from deploykeys.application.calls import ApiCall, ApiStream
from deploykeys.domain.connection_interface import IApiConnection
from deploykeys.domain.deploy_keys_interface import IDeployKeysClient
from deploykeys.domain.errors import ValidationError
from deploykeys.domain.models import (
    ApiOptions,
    DeployKey,
    NewDeployKey,
    RepositoryId,
    RepositoryName,
    RepositoryReference,
)


logger = logging.getLogger(__name__)


def repository_path(repository: RepositoryReference) -> str:
    """Build the API path of a repository from either kind of reference.

    Args:
        repository: Owner/name pair or numeric repository id

    Returns:
        ``/repos/{owner}/{name}`` or ``/repositories/{id}``
    """
    if isinstance(repository, RepositoryName):
        repository.validate()
        return f"/repos/{repository.owner}/{repository.name}"
    if isinstance(repository, RepositoryId):
        repository.validate()
        return f"/repositories/{repository.repository_id}"
    raise ValidationError(f"Unsupported repository reference: {repository!r}")


def _keys_path(repository: RepositoryReference) -> str:
    return f"{repository_path(repository)}/keys"


def _key_path(repository: RepositoryReference, deploy_key_id: int) -> str:
    if isinstance(deploy_key_id, bool) or not isinstance(deploy_key_id, int) or deploy_key_id <= 0:
        raise ValidationError(f"deploy_key_id must be a positive integer, got {deploy_key_id!r}")
    return f"{_keys_path(repository)}/{deploy_key_id}"


class DeployKeysClient(IDeployKeysClient):
    """Client for GitHub's Repository Deploy Keys API.

    Arguments are validated as soon as an operation is invoked, so bad input
    fails before any request exists. The request itself runs when the
    returned call is awaited or iterated. No retries are made; errors
    raised by the connection reach the caller unchanged.
    """

    def __init__(self, connection: IApiConnection):
        """Initialize the client.

        Args:
            connection: Transport used for every request
        """
        self._connection = connection

    def get(self, repository: RepositoryReference, deploy_key_id: int) -> ApiCall[DeployKey]:
        path = _key_path(repository, deploy_key_id)

        async def run() -> DeployKey:
            response = await self._connection.request("GET", path)
            return DeployKey.from_api(response.body)

        return ApiCall(run)

    def get_all(
        self,
        repository: RepositoryReference,
        options: Optional[ApiOptions] = None
    ) -> ApiStream[DeployKey]:
        path = _keys_path(repository)
        options = options or ApiOptions.NONE
        options.validate()
        return ApiStream(lambda: self._paginate(path, options))

    def create(self, repository: RepositoryReference, new_deploy_key: NewDeployKey) -> ApiCall[DeployKey]:
        if new_deploy_key is None:
            raise ValidationError("new_deploy_key is required")
        path = _keys_path(repository)
        new_deploy_key.validate()
        payload = new_deploy_key.to_payload()

        async def run() -> DeployKey:
            response = await self._connection.request("POST", path, json=payload)
            deploy_key = DeployKey.from_api(response.body)
            logger.info(f"Created deploy key {deploy_key.id} ({deploy_key.title!r}) at {path}")
            return deploy_key

        return ApiCall(run)

    def delete(self, repository: RepositoryReference, deploy_key_id: int) -> ApiCall[None]:
        path = _key_path(repository, deploy_key_id)

        async def run() -> None:
            await self._connection.request("DELETE", path)
            logger.info(f"Deleted deploy key at {path}")

        return ApiCall(run)

    async def _paginate(self, path: str, options: ApiOptions) -> AsyncIterator[DeployKey]:
        """Walk the listing page by page, following ``next`` links.

        Items already yielded stay with the caller if a later page fails.
        """
        url: Optional[str] = path
        params = options.to_params() or None
        pages = 0

        while url:
            response = await self._connection.request("GET", url, params=params)
            pages += 1
            items = response.body or []
            logger.debug(f"Fetched page {pages} of {path} with {len(items)} deploy keys")

            for item in items:
                yield DeployKey.from_api(item)

            if options.page_count is not None and pages >= options.page_count:
                break

            # next links already carry the query string
            url = response.next_url
            params = None

    async def close(self) -> None:
        """Close the underlying connection."""
        await self._connection.close()

    async def __aenter__(self) -> 'DeployKeysClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
