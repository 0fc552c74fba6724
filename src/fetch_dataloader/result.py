"""
Single-outcome broadcast result shared by every caller of the same key.
"""
import asyncio
from enum import Enum
from typing import Any, Callable, Generator, Generic, Optional, TypeVar

T = TypeVar("T")


class ResultState(str, Enum):
    """Lifecycle of a cache entry."""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    ERRORED = "errored"


class SharedResult(Generic[T]):
    """
    SharedResult - an awaitable that settles exactly once.

    Every caller that asked for the same key receives the same instance.
    It can be awaited any number of times, by any number of tasks, and
    always yields the same value or raises the same exception. Cancelling
    one awaiting task does not cancel the shared outcome.

    Example:
        result = loader.get(42)
        user = await result

        result.subscribe(
            on_next=lambda user: print(user),
            on_error=lambda err: print(err),
        )
    """

    def __init__(
        self,
        key: Any = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.key = key
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future[T] = self._loop.create_future()
        self._state = ResultState.PENDING

    @classmethod
    def failed(cls, error: BaseException, key: Any = None) -> "SharedResult[T]":
        """Create a result that has already settled with an error."""
        result: SharedResult[T] = cls(key)
        result.set_exception(error)
        return result

    @property
    def state(self) -> ResultState:
        return self._state

    def mark_in_flight(self) -> None:
        """Record that the loader has been invoked for this key."""
        if self._state is ResultState.PENDING:
            self._state = ResultState.IN_FLIGHT

    def done(self) -> bool:
        return self._future.done()

    def set_result(self, value: T) -> None:
        """Settle with a value. Raises asyncio.InvalidStateError if already settled."""
        self._future.set_result(value)
        self._state = ResultState.RESOLVED

    def set_exception(self, error: BaseException) -> None:
        """Settle with an error. Raises asyncio.InvalidStateError if already settled."""
        self._future.set_exception(error)
        self._state = ResultState.ERRORED
        # Errors stay cached and may never be awaited; mark as retrieved so
        # the loop does not report them at garbage collection.
        self._future.exception()

    def result(self) -> T:
        """Return the value, raise the error, or raise InvalidStateError if pending."""
        return self._future.result()

    def exception(self) -> Optional[BaseException]:
        return self._future.exception()

    def subscribe(
        self,
        on_next: Optional[Callable[[T], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> Callable[[], None]:
        """
        Register callbacks for the outcome.

        Callbacks always run from the event loop, even when the result has
        already settled. Exactly one of on_next (followed by on_complete)
        or on_error is invoked.

        Returns:
            A function that removes the subscription.
        """

        def _deliver(future: "asyncio.Future[T]") -> None:
            if future.cancelled():
                return
            error = future.exception()
            if error is not None:
                if on_error is not None:
                    on_error(error)
                return
            if on_next is not None:
                on_next(future.result())
            if on_complete is not None:
                on_complete()

        self._future.add_done_callback(_deliver)
        return lambda: self._future.remove_done_callback(_deliver)

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.shield(self._future).__await__()

    def __repr__(self) -> str:
        return f"<SharedResult key={self.key!r} state={self._state.value}>"
