"""
Transactional Operation Units

A ``Tx`` is deferred work bound to a context (a live database session,
an in-memory working copy, a cache connection) only when it is run.
Units compose with ``map``, ``map_err``, ``and_then`` and ``try_map`` so
business logic can be written once per context type while the caller
alone decides how the context is opened, committed or rolled back.

Errors are ordinary exceptions: a unit either returns its item or raises.
"""

from typing import Any, Awaitable, Callable, Generic, Tuple, Type, TypeVar, Union

Ctx = TypeVar("Ctx")
T = TypeVar("T")
U = TypeVar("U")

ErrorTypes = Union[Type[BaseException], Tuple[Type[BaseException], ...]]


class Tx(Generic[Ctx, T]):
    """Deferred unit of work run against a context."""

    __slots__ = ("_work",)

    def __init__(self, work: Callable[[Ctx], Awaitable[T]]):
        self._work = work

    async def run(self, ctx: Ctx) -> T:
        """Execute the unit against ``ctx``."""
        return await self._work(ctx)

    @classmethod
    def pure(cls, value: T) -> "Tx[Any, T]":
        """Unit that ignores its context and yields ``value``."""

        async def _pure(_ctx):
            return value

        return cls(_pure)

    def map(self, f: Callable[[T], U]) -> "Tx[Ctx, U]":
        """Transform the success value."""

        async def _map(ctx):
            return f(await self.run(ctx))

        return Tx(_map)

    def map_err(
        self,
        f: Callable[[BaseException], BaseException],
        catch: ErrorTypes = Exception,
    ) -> "Tx[Ctx, T]":
        """Translate raised errors of type ``catch`` into ``f(error)``.

        The original error is kept as ``__cause__`` of the translated one.
        """

        async def _map_err(ctx):
            try:
                return await self.run(ctx)
            except catch as e:
                raise f(e) from e

        return Tx(_map_err)

    def and_then(self, f: Callable[[T], "Tx[Ctx, U]"]) -> "Tx[Ctx, U]":
        """Sequence a second unit built from this unit's value.

        Both units run on the same context; an error in the first one
        short-circuits the second.
        """

        async def _and_then(ctx):
            value = await self.run(ctx)
            return await f(value).run(ctx)

        return Tx(_and_then)

    def try_map(
        self,
        predicate: Callable[[T], bool],
        error: Callable[[T], BaseException],
    ) -> "Tx[Ctx, T]":
        """Turn a success value rejected by ``predicate`` into a failure.

        Values for which ``predicate`` holds pass through unchanged; any
        other value raises ``error(value)``.
        """

        async def _try_map(ctx):
            value = await self.run(ctx)
            if not predicate(value):
                raise error(value)
            return value

        return Tx(_try_map)


def with_tx(work: Callable[[Ctx], Awaitable[T]]) -> Tx[Ctx, T]:
    """Wrap a coroutine function of the context into a ``Tx``."""
    return Tx(work)
