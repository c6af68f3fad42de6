"""
LazyInjectionModule

This module provides the immutable builder used to declare services.
A LazyInjectionModule maps keys to factory registrations and optionally
points at an already finalized parent container.

Key features:
- Persistent: add(), add_transient() and override() return a new module and
  never change the receiver, so one module can be the base of many
  divergent override chains
- Duplicate protection for add(), deliberate replacement with override()
- finalize() can be called any number of times, each call producing an
  independent container with an empty cache

Example::

    module = (
        define()
        .add("db", lambda c: Database())
        .add("users", lambda c: UserService(c.get("db")))
    )

    container = module.finalize()
    test_container = module.override("db", lambda c: FakeDatabase()).finalize()
"""

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, TYPE_CHECKING

from .definition import Factory, Key, Registration
from .exceptions import DuplicateDefinitionError, InvalidConstructionError
from .lifecycle import LazyInjectionLifeCycle

if TYPE_CHECKING:
    from .container import LazyInjectionContainer

_CONSTRUCTION_TOKEN = object()


class LazyInjectionModule:
    """Immutable builder for service registrations.

    Attributes:
        _registrations: Read-only mapping of key to Registration
        _parent: Container that undeclared keys are delegated to (optional)

    Note:
        Do not instantiate this class directly. Use ``define()`` or
        ``LazyInjectionContainer.create_child()``.
    """

    def __init__(
        self,
        registrations: Optional[Mapping[Key, Registration]] = None,
        parent: Optional['LazyInjectionContainer'] = None,
        *,
        _token: Any = None
    ):
        """Initialize a module (internal use only).

        Raises:
            InvalidConstructionError: When called outside of ``define()``
                and the builder methods
        """
        if _token is not _CONSTRUCTION_TOKEN:
            raise InvalidConstructionError(
                "LazyInjectionModule cannot be constructed directly. "
                "Use define() to start a new module."
            )
        self._registrations: Mapping[Key, Registration] = MappingProxyType(
            dict(registrations or {})
        )
        self._parent = parent

    @classmethod
    def _create(
        cls,
        registrations: Mapping[Key, Registration],
        parent: Optional['LazyInjectionContainer']
    ) -> 'LazyInjectionModule':
        return cls(registrations, parent, _token=_CONSTRUCTION_TOKEN)

    @property
    def registrations(self) -> Mapping[Key, Registration]:
        """Own registrations (read-only).

        Keys provided only by the parent container are not included.
        """
        return self._registrations

    @property
    def parent(self) -> Optional['LazyInjectionContainer']:
        """Container undeclared keys are delegated to, if any."""
        return self._parent

    def has(self, key: Key) -> bool:
        """Check whether ``key`` is registered here or resolvable through the parent."""
        if key in self._registrations:
            return True
        return self._parent is not None and self._parent.has(key)

    def add(self, key: Key, factory: Factory) -> 'LazyInjectionModule':
        """Add a memoized service factory at ``key``.

        The factory is called with the container at most once per container
        (until a failed asynchronous resolution is retried).

        Args:
            key: The service key
            factory: Callable receiving the container and returning the
                service, or an awaitable resolving to it

        Returns:
            A new module containing the registration

        Raises:
            DuplicateDefinitionError: When ``key`` is already registered here
                or resolvable through the parent container

        Example::

            module = define().add("config", lambda c: load_config())
        """
        return self._add(key, Registration(factory))

    def add_transient(self, key: Key, factory: Factory) -> 'LazyInjectionModule':
        """Add a transient service factory at ``key``.

        Transient services are created each time they are requested
        instead of being memoized.

        Raises:
            DuplicateDefinitionError: When ``key`` is already resolvable
        """
        return self._add(
            key, Registration(factory, LazyInjectionLifeCycle.TRANSIENT)
        )

    def _add(self, key: Key, registration: Registration) -> 'LazyInjectionModule':
        if self.has(key):
            raise DuplicateDefinitionError(f"Service already defined: {key}")
        return self._with(key, registration)

    def override(
        self,
        key: Key,
        factory: Factory,
        *,
        transient: bool = False
    ) -> 'LazyInjectionModule':
        """Replace the factory at ``key``.

        This is useful for testing where you want to replace a service
        with a mock or test implementation. Unlike ``add()``, the key may
        already be registered here or in the parent container; a key
        inherited from the parent is shadowed for containers finalized from
        the returned module only.

        The lifecycle of the replaced registration is not carried over.

        Args:
            key: The service key
            factory: The replacement factory
            transient: Register the replacement as transient

        Returns:
            A new module with the replacement

        Example::

            test_module = module.override("mailer", lambda c: FakeMailer())
        """
        lifecycle = (
            LazyInjectionLifeCycle.TRANSIENT if transient
            else LazyInjectionLifeCycle.MEMOIZED
        )
        return self._with(key, Registration(factory, lifecycle))

    def _with(self, key: Key, registration: Registration) -> 'LazyInjectionModule':
        registrations = dict(self._registrations)
        registrations[key] = registration
        return self._create(registrations, self._parent)

    def finalize(self) -> 'LazyInjectionContainer':
        """Create a container from this module.

        The module is left untouched and may be finalized again; every
        container gets its own empty cache but shares the parent container.

        Returns:
            A new LazyInjectionContainer
        """
        from .container import LazyInjectionContainer

        return LazyInjectionContainer(self._registrations, self._parent)

    def __contains__(self, key: Key) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[Key]:
        return iter(self._registrations)

    def __len__(self) -> int:
        return len(self._registrations)

    def __repr__(self) -> str:
        keys = ", ".join(str(k) for k in self._registrations)
        return f"LazyInjectionModule([{keys}])"
