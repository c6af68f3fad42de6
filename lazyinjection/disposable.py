"""
Disposal Capabilities

Protocols a service opts into to be released when its container is disposed.

- Disposable: exposes ``close()``, called by ``dispose()`` and, when no
  ``aclose()`` exists, by ``dispose_async()``
- AsyncDisposable: exposes ``aclose()`` returning an awaitable, called by
  ``dispose_async()`` in preference to ``close()``

Both are ``runtime_checkable`` so the container can test membership with
``isinstance``. Any object with a matching method satisfies the protocol,
including files, sockets, async generators and most client libraries.

Example::

    class Connection:
        def close(self) -> None:
            ...

    isinstance(Connection(), Disposable)  # True
"""

from typing import Any, Awaitable, Protocol, runtime_checkable


@runtime_checkable
class Disposable(Protocol):
    """Service releasing its resources synchronously."""

    def close(self) -> Any:
        ...


@runtime_checkable
class AsyncDisposable(Protocol):
    """Service releasing its resources asynchronously."""

    def aclose(self) -> Awaitable[Any]:
        ...
