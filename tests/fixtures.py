"""
Test Fixtures

Common service classes and factory helpers used across test modules
"""

from typing import Any, Callable, List


class Database:
    """Test database class"""

    def __init__(self):
        self.name = "TestDB"


class UserService:
    """Test service with a dependency"""

    def __init__(self, db: Database):
        self.db = db


class CountingFactory:
    """Factory that records how many times it was called.

    Example:
        >>> factory = CountingFactory(lambda: {"value": 5})
        >>> container = define().add("A", factory).finalize()
        >>> container.get("A")
        >>> factory.calls
        1
    """

    def __init__(self, produce: Callable[[], Any]):
        self.calls = 0
        self._produce = produce

    def __call__(self, container) -> Any:
        self.calls += 1
        return self._produce()


class AsyncCountingFactory(CountingFactory):
    """Async variant of CountingFactory (the factory returns a coroutine)"""

    async def _create(self) -> Any:
        return self._produce()

    def __call__(self, container) -> Any:
        self.calls += 1
        return self._create()


class SyncResource:
    """Service that only supports synchronous disposal"""

    def __init__(self):
        self.closed = 0

    def close(self):
        self.closed += 1


class AsyncResource:
    """Service that only supports asynchronous disposal"""

    def __init__(self):
        self.aclosed = 0

    async def aclose(self):
        self.aclosed += 1


class DualResource:
    """Service that supports both disposal styles"""

    def __init__(self):
        self.closed = 0
        self.aclosed = 0

    def close(self):
        self.closed += 1

    async def aclose(self):
        self.aclosed += 1


class OrderedResource:
    """Service recording its name in a shared list when closed"""

    def __init__(self, name: str, log: List[str]):
        self.name = name
        self._log = log

    def close(self):
        self._log.append(self.name)


class FailingResource:
    """Service whose close() raises"""

    def __init__(self, message: str):
        self.message = message

    def close(self):
        raise RuntimeError(self.message)
