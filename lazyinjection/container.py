"""
LazyInjectionContainer

This module provides the finalized, resolvable container. It is the heart of
the LazyInjection package, responsible for:

- Lazily creating services on first request and memoizing them
- Sharing one pending future between callers of an asynchronous service
  until it settles (single-flight), and un-memoizing failed resolutions
- Delegating undeclared keys to the parent container
- Detecting circular dependencies
- Disposing realized services synchronously or asynchronously

Containers are created with ``LazyInjectionModule.finalize()``.
"""

import asyncio
import functools
import inspect
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .cache import CacheEntry, Direct, InFlight, Settled
from .definition import Key, Registration
from .disposable import AsyncDisposable, Disposable
from .exceptions import (
    AsyncDisposalRequiredError,
    ContainerClosedError,
    DefinitionNotFoundError,
)
from .module import LazyInjectionModule
from .resolution_context import resolving

logger = logging.getLogger(__name__)


class LazyInjectionContainer:
    """Resolvable container with its own memoization cache.

    Own registrations always take precedence over the parent chain. Values
    delegated to the parent are cached on the parent, never copied into this
    container, so any number of children share one parent cache.

    Attributes:
        _registrations: Registrations captured when the module was finalized
        _parent: Container that undeclared keys are delegated to (optional)
        _cache: Memoized entries for keys resolved through this container
        _disposed: Whether dispose() or dispose_async() has completed

    Example::

        with define().add("db", lambda c: Database()).finalize() as container:
            db = container.get("db")
            assert container.get("db") is db
        # db.close() is called automatically
    """

    def __init__(
        self,
        registrations: Mapping[Key, Registration],
        parent: Optional['LazyInjectionContainer'] = None
    ):
        self._registrations = registrations
        self._parent = parent
        self._cache: Dict[Key, CacheEntry] = {}
        self._disposed = False

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise ContainerClosedError("This container has already been disposed")

    @property
    def parent(self) -> Optional['LazyInjectionContainer']:
        return self._parent

    @property
    def is_disposed(self) -> bool:
        """Check whether this container has been disposed."""
        return self._disposed

    def has(self, key: Key) -> bool:
        """Check whether ``key`` is resolvable in this container or its parents."""
        if key in self._registrations:
            return True
        return self._parent is not None and self._parent.has(key)

    def keys(self) -> List[Key]:
        """List every resolvable key, own registrations first."""
        keys = list(self._registrations)
        if self._parent is not None:
            keys.extend(k for k in self._parent.keys() if k not in self._registrations)
        return keys

    def get(self, key: Key) -> Any:
        """Get the service registered at ``key``.

        Memoized services are created on the first call and the same value is
        returned afterwards. Transient services are created on every call.

        When a factory returns an awaitable, the container schedules it as an
        ``asyncio`` task and returns that future; every caller before it
        settles receives the same future. Once it resolves, later calls get a
        new, already-resolved future wrapping the same value. If it fails,
        nothing is memoized and the next call runs the factory again.

        Args:
            key: The service key

        Returns:
            The service, or a future resolving to it

        Raises:
            DefinitionNotFoundError: When the key is not resolvable
            CircularDependencyError: When the factory for ``key`` asks for
                ``key`` again while being constructed
            ContainerClosedError: When the container has been disposed

        Example::

            users = container.get("users")
            client = await container.get("http_client")
        """
        self._ensure_not_disposed()

        entry = self._cache.get(key)
        if entry is not None:
            return entry.read()

        registration = self._registrations.get(key)
        if registration is not None:
            return self._create(key, registration)

        if self._parent is not None and self._parent.has(key):
            logger.debug("Delegating %r to parent container", key)
            return self._parent.get(key)

        resolvable = ", ".join(str(k) for k in self.keys()) or "None"
        raise DefinitionNotFoundError(
            f"Service not found: {key}\n"
            f"Resolvable keys: {resolvable}\n"
            f"Hint: define().add({key!r}, lambda c: ...)"
        )

    def _create(self, key: Key, registration: Registration) -> Any:
        """Invoke the factory for ``key`` and memoize the result.

        The cache is written before returning, so every caller that arrives
        while an asynchronous result is pending finds the same future.
        """
        with resolving(self, key):
            logger.debug("Creating %r", key)
            value = registration.factory(self)

        if registration.is_transient:
            return value

        if not inspect.isawaitable(value):
            self._cache[key] = Direct(value)
            return value

        future = asyncio.ensure_future(value)
        self._cache[key] = InFlight(future)
        future.add_done_callback(functools.partial(self._settle, key))
        return future

    def _settle(self, key: Key, future: asyncio.Future) -> None:
        """Replace the in-flight entry for ``key`` once ``future`` is done."""
        entry = self._cache.get(key)
        if not isinstance(entry, InFlight) or entry.future is not future:
            logger.debug("Discarding settled %r: no longer cached", key)
            return

        if future.cancelled() or future.exception() is not None:
            logger.debug("Resolution of %r failed; it will be retried on next get()", key)
            del self._cache[key]
        else:
            self._cache[key] = Settled(future.result(), future.get_loop())

    def create_child(self) -> LazyInjectionModule:
        """Create a child module rooted at this container.

        This is useful for sharing services of this container with a child
        module which can then have multiple containers created from it.
        For example, an HTTP server can keep application-wide services in
        one container and finalize a child module per request for
        request-only services.

        Returns:
            An empty LazyInjectionModule whose parent is this container

        Raises:
            ContainerClosedError: When the container has been disposed
        """
        self._ensure_not_disposed()
        return LazyInjectionModule._create({}, self)

    def _realized(self) -> List[Tuple[Key, Any]]:
        """Realized values, most recently cached first.

        In-flight futures are skipped: they have no value to release yet.
        """
        values = []
        for key, entry in self._cache.items():
            if isinstance(entry, InFlight):
                logger.debug("Skipping %r on dispose: still pending", key)
                continue
            values.append((key, entry.value))
        values.reverse()
        return values

    def _release(self) -> None:
        self._disposed = True
        self._cache.clear()

    def dispose(self) -> None:
        """Synchronously dispose every realized service of this container.

        Services exposing ``close()`` are closed in reverse order of
        creation. Services that were never requested, transient services and
        services of the parent container are not touched.

        This method is idempotent.

        Raises:
            AsyncDisposalRequiredError: When a realized service only exposes
                ``aclose()``. Nothing is disposed in that case.
        """
        if self._disposed:
            return

        values = self._realized()
        for key, value in values:
            if isinstance(value, AsyncDisposable) and not isinstance(value, Disposable):
                raise AsyncDisposalRequiredError(
                    f"Cannot dispose {key!r} synchronously: it only supports aclose(). "
                    "Use 'async with' or dispose_async() instead of 'with' or dispose()."
                )

        self._release()
        errors: List[BaseException] = []
        for key, value in values:
            if isinstance(value, Disposable):
                logger.debug("Closing %r", key)
                try:
                    value.close()
                except Exception as e:
                    errors.append(e)
        _raise_first(errors)

    async def dispose_async(self) -> None:
        """Asynchronously dispose every realized service of this container.

        ``aclose()`` is preferred over ``close()`` when a service exposes
        both. All ``aclose()`` awaitables run concurrently and this coroutine
        returns once every one of them has finished. If any of them failed,
        the first error is raised after the others completed.

        This method is idempotent.
        """
        if self._disposed:
            return

        values = self._realized()
        self._release()
        errors: List[BaseException] = []
        pending = []
        for key, value in values:
            try:
                if isinstance(value, AsyncDisposable):
                    logger.debug("Closing %r asynchronously", key)
                    result = value.aclose()
                    if inspect.isawaitable(result):
                        pending.append(result)
                elif isinstance(value, Disposable):
                    logger.debug("Closing %r", key)
                    value.close()
            except Exception as e:
                errors.append(e)

        results = await asyncio.gather(*pending, return_exceptions=True)
        errors.extend(r for r in results if isinstance(r, BaseException))
        _raise_first(errors)

    def __contains__(self, key: Key) -> bool:
        return self.has(key)

    def __getitem__(self, key: Key) -> Any:
        """Support subscript syntax: container["key"]."""
        return self.get(key)

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys())

    def __enter__(self) -> 'LazyInjectionContainer':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Dispose the container on leaving a ``with`` block.

        Returns:
            False (exceptions are not suppressed)
        """
        self.dispose()
        return False

    async def __aenter__(self) -> 'LazyInjectionContainer':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.dispose_async()
        return False

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"{len(self._cache)} cached"
        return f"LazyInjectionContainer({len(self._registrations)} registered, {state})"


def _raise_first(errors: List[BaseException]) -> None:
    if not errors:
        return
    for error in errors[1:]:
        logger.warning("Additional error while disposing: %r", error)
    raise errors[0]
