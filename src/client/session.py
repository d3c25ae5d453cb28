"""
Client-side data sessions.

A session keeps the last fetched items of one collection together with a
loading flag and an error message, and moves between five states:

    idle -> loading-fetch -> ready | errored
    ready | errored -> loading-mutate -> ready | errored

Items only change once a call has resolved successfully. Calls on the same
session are not serialized: when two overlap, `loading`, `error` and `state`
end up as written by whichever resolved last, while item updates are applied
to the items current at resolution time so neither result is lost.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from client.http import ApiError
from client.models import Post, Product, User
from client.services import PostService, ProductService, UserService
from utils.logger import get_logger

_logger = get_logger("session")

T = TypeVar("T")


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING_FETCH = "loading-fetch"
    LOADING_MUTATE = "loading-mutate"
    READY = "ready"
    ERRORED = "errored"


@dataclass(frozen=True)
class SessionSnapshot(Generic[T]):
    items: Tuple[T, ...]
    loading: bool
    error: Optional[str]
    state: SessionState


Listener = Callable[[SessionSnapshot], None]
_UNSET: Any = object()


class CollectionSession(Generic[T]):
    """
    Items, loading flag and error for one collection, kept in step with the server.

    Must be created inside a running event loop: construction schedules the one
    automatic fetch (`initial_fetch`). After that, fetches only happen through
    `refetch()`.
    """

    label = "items"

    def __init__(
        self,
        fetch_all: Callable[[], Awaitable[Sequence[T]]],
        create: Optional[Callable[[Mapping[str, Any]], Awaitable[T]]] = None,
        update: Optional[Callable[[int, Mapping[str, Any]], Awaitable[T]]] = None,
        delete: Optional[Callable[[int], Awaitable[Any]]] = None,
    ) -> None:
        self._fetch_all = fetch_all
        self._create = create
        self._update = update
        self._delete = delete

        self._items: Tuple[T, ...] = ()
        self._loading = False
        self._error: Optional[str] = None
        self._state = SessionState.IDLE
        self._listeners: List[Listener] = []
        self._closed = False

        self.initial_fetch: asyncio.Task = asyncio.get_running_loop().create_task(
            self.refetch()
        )

    # ---------------------------
    # State
    # ---------------------------

    @property
    def items(self) -> Tuple[T, ...]:
        return self._items

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def snapshot(self) -> SessionSnapshot[T]:
        return SessionSnapshot(self._items, self._loading, self._error, self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with a snapshot after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach the session. In-flight calls still finish but no longer touch it."""
        self._closed = True
        self._listeners.clear()

    def _set(
        self,
        state: SessionState,
        loading: bool,
        error: Optional[str],
        items: Tuple[T, ...] = _UNSET,
    ) -> None:
        if self._closed:
            return
        if items is not _UNSET:
            self._items = items
        self._state = state
        self._loading = loading
        self._error = error

        snapshot = self.snapshot
        for listener in list(self._listeners):
            # listener failures are logged; later listeners still run
            try:
                listener(snapshot)
            except Exception:
                _logger.exception(f"{self.label} listener {listener!r} failed")

    def _fail(self, error: Exception, fallback: str) -> None:
        if isinstance(error, ApiError):
            _logger.debug(f"{self.label}: {error.message}")
        else:
            _logger.exception(f"{self.label}: unexpected {type(error).__name__}")
        self._set(SessionState.ERRORED, False, getattr(error, "message", None) or fallback)

    # ---------------------------
    # Fetching
    # ---------------------------

    async def _run_fetch(
        self, loader: Callable[[], Awaitable[Sequence[T]]], fallback: str
    ) -> None:
        self._set(SessionState.LOADING_FETCH, True, None)
        try:
            items = tuple(await loader())
        except Exception as e:
            self._fail(e, fallback)
            return
        self._set(SessionState.READY, False, None, items)

    async def refetch(self) -> None:
        """Reload every item. A failure is recorded in `error`, not raised."""
        await self._run_fetch(self._fetch_all, f"Failed to fetch {self.label}")

    # ---------------------------
    # Mutations
    # ---------------------------

    async def _mutate(
        self,
        call: Callable[[], Awaitable[Any]],
        apply: Callable[[Tuple[T, ...], Any], Tuple[T, ...]],
        fallback: str,
    ):
        self._set(SessionState.LOADING_MUTATE, True, None)
        try:
            result = await call()
            items = apply(self._items, result)
        except Exception as e:
            self._fail(e, fallback)
            raise
        self._set(SessionState.READY, False, None, items)
        return result

    def _require(self, op, name: str):
        if op is None:
            raise NotImplementedError(f"{type(self).__name__} does not support {name}")
        return op

    async def create(self, fields: Mapping[str, Any]) -> T:
        """Create a record and append it. Re-raises the failure."""
        create = self._require(self._create, "create")
        return await self._mutate(
            lambda: create(fields),
            lambda items, new: items + (new,),
            f"Failed to create {self.label}",
        )

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> T:
        """Update a record and swap it in by id. Re-raises the failure."""
        update = self._require(self._update, "update")
        return await self._mutate(
            lambda: update(record_id, fields),
            lambda items, updated: tuple(
                updated if item.id == record_id else item for item in items
            ),
            f"Failed to update {self.label}",
        )

    async def delete(self, record_id: int) -> None:
        """Delete a record and drop it by id. Re-raises the failure."""
        delete = self._require(self._delete, "delete")
        await self._mutate(
            lambda: delete(record_id),
            lambda items, _: tuple(item for item in items if item.id != record_id),
            f"Failed to delete {self.label}",
        )


class UserSession(CollectionSession[User]):
    label = "users"

    def __init__(self, service: UserService) -> None:
        super().__init__(
            service.get_all_users,
            service.create_user,
            service.update_user,
            service.delete_user,
        )

    @property
    def users(self) -> Tuple[User, ...]:
        return self.items

    create_user = CollectionSession.create
    update_user = CollectionSession.update
    delete_user = CollectionSession.delete


class PostSession(CollectionSession[Post]):
    label = "posts"

    def __init__(self, service: PostService) -> None:
        super().__init__(
            service.get_all_posts,
            service.create_post,
            service.update_post,
            service.delete_post,
        )

    @property
    def posts(self) -> Tuple[Post, ...]:
        return self.items

    create_post = CollectionSession.create
    update_post = CollectionSession.update
    delete_post = CollectionSession.delete


class ProductSession(CollectionSession[Product]):
    label = "products"

    def __init__(self, service: ProductService) -> None:
        self._service = service
        super().__init__(
            service.get_all_products,
            service.create_product,
            service.update_product,
            service.delete_product,
        )

    @property
    def products(self) -> Tuple[Product, ...]:
        return self.items

    async def fetch_by_category(self, category: str) -> None:
        """Replace items with one category's products; same lifecycle as refetch."""
        await self._run_fetch(
            lambda: self._service.get_products_by_category(category),
            "Failed to fetch products by category",
        )

    create_product = CollectionSession.create
    update_product = CollectionSession.update
    delete_product = CollectionSession.delete
