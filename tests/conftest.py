"""Shared fixtures: an in-memory stand-in for the GitHub deploy keys endpoints."""
import asyncio
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit
import pytest
from deploykeys.application.deploy_keys_client import DeployKeysClient
from deploykeys.domain.connection_interface import ApiResponse, IApiConnection
from deploykeys.domain.errors import ApiError, NotFoundError, UnprocessableEntityError


BASE_URL = "https://api.github.test"
DEFAULT_PER_PAGE = 30

_BY_NAME = re.compile(r"^/repos/([^/]+)/([^/]+)/keys(?:/(\d+))?$")
_BY_ID = re.compile(r"^/repositories/(\d+)/keys(?:/(\d+))?$")


class FakeGitHubConnection(IApiConnection):
    """Records every request and answers like the deploy keys API."""

    def __init__(self):
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]], Optional[Dict[str, Any]]]] = []
        self.repositories: Dict[Tuple[str, str], int] = {}
        self.keys: Dict[int, List[Dict[str, Any]]] = {}
        self.fail_on_page: Optional[int] = None
        self.block_on_page: Optional[int] = None
        self.blocked = asyncio.Event()
        self.closed = False
        self._next_key_id = 1

    def add_repository(self, repository_id: int, owner: str, name: str) -> None:
        self.repositories[(owner, name)] = repository_id
        self.keys[repository_id] = []

    def add_key(self, repository_id: int, title: str, key: str, read_only: bool = False) -> Dict[str, Any]:
        key_id = self._next_key_id
        self._next_key_id += 1
        record = {
            "id": key_id,
            "key": key,
            "title": title,
            "verified": True,
            "read_only": read_only,
            "created_at": "2024-01-01T12:00:00Z",
            "url": f"{BASE_URL}/repositories/{repository_id}/keys/{key_id}",
            "last_used": None,
        }
        self.keys[repository_id].append(record)
        return record

    def paths(self) -> List[str]:
        return [path for _, path, _, _ in self.calls]

    def _resolve(self, path: str) -> Tuple[int, Optional[int]]:
        match = _BY_NAME.match(path)
        if match:
            owner, name, key_id = match.groups()
            repository_id = self.repositories.get((owner, name))
        else:
            match = _BY_ID.match(path)
            if not match:
                raise NotFoundError(404, "Not Found")
            raw_id, key_id = match.groups()
            repository_id = int(raw_id) if int(raw_id) in self.keys else None
        if repository_id is None:
            raise NotFoundError(404, "Not Found")
        return repository_id, int(key_id) if key_id else None

    def _find_key(self, repository_id: int, key_id: int) -> Dict[str, Any]:
        for record in self.keys[repository_id]:
            if record["id"] == key_id:
                return record
        raise NotFoundError(404, "Not Found")

    async def request(self, method, path, params=None, json=None) -> ApiResponse:
        self.calls.append((method, path, params, json))

        parts = urlsplit(path)
        query = dict(parse_qsl(parts.query))
        query.update(params or {})
        repository_id, key_id = self._resolve(parts.path)

        if method == "GET" and key_id is None:
            per_page = int(query.get("per_page", DEFAULT_PER_PAGE))
            page = int(query.get("page", 1))
            if page == self.fail_on_page:
                raise ApiError(502, "Server Error")
            if page == self.block_on_page:
                self.blocked.set()
                await asyncio.Event().wait()
            records = self.keys[repository_id]
            start = (page - 1) * per_page
            next_url = None
            if start + per_page < len(records):
                next_url = f"{BASE_URL}{parts.path}?per_page={per_page}&page={page + 1}"
            return ApiResponse(200, [dict(r) for r in records[start:start + per_page]], next_url=next_url)

        if method == "GET":
            return ApiResponse(200, dict(self._find_key(repository_id, key_id)))

        if method == "POST":
            in_use = any(r["key"] == json["key"] for records in self.keys.values() for r in records)
            if in_use:
                raise UnprocessableEntityError(
                    422, "Validation Failed", errors=[{"message": "key is already in use"}]
                )
            record = self.add_key(repository_id, json["title"], json["key"], json.get("read_only", False))
            return ApiResponse(201, dict(record))

        if method == "DELETE":
            record = self._find_key(repository_id, key_id)
            self.keys[repository_id].remove(record)
            return ApiResponse(204, None)

        raise ApiError(405, "Method Not Allowed")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_github():
    connection = FakeGitHubConnection()
    connection.add_repository(1296269, "octocat", "hello-world")
    return connection


@pytest.fixture
def client(fake_github):
    return DeployKeysClient(fake_github)
