"""Lazy, memoized initialization for expensive async setup."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import update_wrapper
from typing import Generic, ParamSpec, TypeVar


P = ParamSpec("P")
T = TypeVar("T")


class LazyInit(Generic[P, T]):
    """Run an async bootstrapper once and share its result.

    The first call starts the bootstrapper; every later call, including
    calls made while the first is still pending, awaits that same attempt.
    Arguments of later calls are ignored. A failed attempt is not memoized,
    so the next call retries.
    """

    def __init__(self, bootstrapper: Callable[P, Awaitable[T]]) -> None:
        self._bootstrapper = bootstrapper
        self._task: asyncio.Future[T] | None = None
        update_wrapper(self, bootstrapper)

    async def __call__(self, *args: P.args, **kwargs: P.kwargs) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._bootstrapper(*args, **kwargs))
        task = self._task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._task is task and task.done():
                self._task = None
            raise

    @property
    def initialized(self) -> bool:
        """True once the bootstrapper has completed successfully."""
        return (
            self._task is not None
            and self._task.done()
            and not self._task.cancelled()
            and self._task.exception() is None
        )

    def reset(self) -> None:
        """Forget the memoized value so the next call bootstraps again."""
        self._task = None


def lazy_init(bootstrapper: Callable[P, Awaitable[T]]) -> LazyInit[P, T]:
    """Decorator form of ``LazyInit``.

    Example:
        @lazy_init
        async def get_client(url: str) -> Client:
            client = Client(url)
            await client.connect()
            return client
    """
    return LazyInit(bootstrapper)
