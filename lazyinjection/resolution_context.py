"""
ResolutionContext

This module tracks the services currently being constructed so that a
factory asking for its own key (directly or through other factories) fails
with CircularDependencyError instead of recursing until RecursionError.

The context is stored in a ContextVar and is managed by the container
around every synchronous factory call.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Tuple, TYPE_CHECKING

from .exceptions import CircularDependencyError

if TYPE_CHECKING:
    from .container import LazyInjectionContainer


class ResolutionContext:
    """Chain of (container, key) pairs under construction.

    Each nested factory call gets a new context that extends the chain of
    the caller, so sibling resolutions never see each other's keys.

    Attributes:
        resolving: Ordered chain of (container id, key) pairs

    Note:
        This class is used internally by LazyInjectionContainer.
        Users should not need to interact with it directly.
    """

    def __init__(self, resolving: Tuple[Tuple[int, Any], ...] = ()):
        self.resolving = resolving

    def contains(self, container: 'LazyInjectionContainer', key: Any) -> bool:
        return (id(container), key) in self.resolving

    def extend(self, container: 'LazyInjectionContainer', key: Any) -> 'ResolutionContext':
        return ResolutionContext(self.resolving + ((id(container), key),))

    def describe_cycle(self, key: Any) -> str:
        """Render the chain as ``a -> b -> a``."""
        return " -> ".join(str(k) for _, k in self.resolving) + f" -> {key}"


_resolution_context: ContextVar[ResolutionContext] = ContextVar(
    '_LAZY_INJECTION_RESOLUTION_CONTEXT',
    default=ResolutionContext()
)


@contextmanager
def resolving(container: 'LazyInjectionContainer', key: Any) -> Iterator[None]:
    """Mark ``key`` as under construction in ``container`` for the block.

    Raises:
        CircularDependencyError: When the key is already under construction
    """
    ctx = _resolution_context.get()
    if ctx.contains(container, key):
        raise CircularDependencyError(
            f"Circular dependency detected: {ctx.describe_cycle(key)}"
        )

    token = _resolution_context.set(ctx.extend(container, key))
    try:
        yield
    finally:
        _resolution_context.reset(token)
