"""
Cache Entries

The three states a memoized key can be in:

- Direct: a value returned synchronously by its factory
- InFlight: an asynchronous resolution that has not settled yet
- Settled: an asynchronous resolution that completed successfully

Only containers create and read these entries.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Direct:
    """Value produced synchronously"""
    value: Any

    def read(self) -> Any:
        return self.value


@dataclass(frozen=True)
class InFlight:
    """Pending resolution shared by every caller until it settles"""
    future: asyncio.Future

    def read(self) -> asyncio.Future:
        return self.future


@dataclass(frozen=True)
class Settled:
    """Value produced asynchronously that has since resolved.

    Reads hand out a new, already-resolved future wrapping the value, so
    later callers never hold the original future object. The future belongs
    to the running loop; ``loop`` (the loop that resolved the value) is only
    used when read outside of any loop.
    """
    value: Any
    loop: asyncio.AbstractEventLoop

    def read(self) -> asyncio.Future:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = self.loop
        future = loop.create_future()
        future.set_result(self.value)
        return future


CacheEntry = Union[Direct, InFlight, Settled]
