"""Lazily started API calls.

Nothing is sent when an operation is invoked; the request is made when the
returned object is awaited (ApiCall) or iterated (ApiStream). Every await or
iteration starts a fresh request, so the same call object can be reused.
"""
from typing import Any, AsyncIterator, Callable, Coroutine, Generator, Generic, List, TypeVar


T = TypeVar("T")


class ApiCall(Generic[T]):
    """Awaitable producing a single result per await."""

    def __init__(self, factory: Callable[[], Coroutine[Any, Any, T]]):
        self._factory = factory

    def __await__(self) -> Generator[Any, None, T]:
        return self._factory().__await__()


class ApiStream(Generic[T]):
    """Async iterable walking a paginated listing.

    Pages are requested only as items are consumed. Leaving the loop early
    (or cancelling the consuming task) stops any further page requests.
    """

    def __init__(self, factory: Callable[[], AsyncIterator[T]]):
        self._factory = factory

    def __aiter__(self) -> AsyncIterator[T]:
        return self._factory()

    async def to_list(self) -> List[T]:
        """Drain the stream into a list."""
        return [item async for item in self]
