import asyncio
import typing

from loguru import logger

T = typing.TypeVar("T")


class TraversalContext:
    """
    The state shared by every branch of one traversal tree: the keys that have
    been claimed, and the hydrations currently running for them.

    Claiming is a plain check-and-add with no suspension point in between, so it
    is atomic with respect to other coroutines on the same event loop.
    """

    claimed: typing.Set[str]
    _tasks: typing.Dict[str, "asyncio.Future[typing.Any]"]

    def is_claimed(self, key: str) -> bool:
        return key in self.claimed

    def claim(self, key: str) -> bool:
        if key in self.claimed:
            return False
        self.claimed.add(key)
        logger.debug(f"claimed {key}")
        return True

    def release(self, key: str) -> None:
        if key not in self._tasks and key in self.claimed:
            self.claimed.discard(key)
            logger.debug(f"released {key}")

    def result(self, key: str) -> typing.Optional[typing.Any]:
        """
        Returns the result of a hydration that finished successfully, or None.
        """
        task = self._tasks.get(key)
        if task is None or not task.done() or task.cancelled() or task.exception() is not None:
            return None
        return task.result()

    async def run_once(self, key: str, factory: typing.Callable[[], typing.Awaitable[T]]) -> T:
        """
        Runs ``factory`` for the key unless a run for the same key has already
        been started, in which case that run's outcome is awaited instead.
        A failed run is forgotten so that a later call starts over.
        """
        task = self._tasks.get(key)
        if task is None:
            self.claimed.add(key)
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda t: self._forget_failed(key, t))
        else:
            logger.debug(f"joining hydration of {key}")
        return await asyncio.shield(task)

    def _forget_failed(self, key: str, task: "asyncio.Future[typing.Any]") -> None:
        if task.cancelled() or task.exception() is not None:
            if self._tasks.get(key) is task:
                del self._tasks[key]
            self.claimed.discard(key)

    def clear(self) -> None:
        self.claimed.clear()
        self._tasks.clear()

    def __init__(self):
        self.claimed = set()
        self._tasks = {}
