"""
LazyInjection Exceptions

Custom exception hierarchy for the LazyInjection container
"""


class LazyInjectionError(Exception):
    """
    Base exception for all LazyInjection errors.

    All LazyInjection-specific exceptions inherit from this class.
    You can catch this to handle any LazyInjection error generically.

    Note:
        Exceptions raised by factories themselves are never wrapped.
        They reach the caller of ``get()`` unchanged.

    Example:
        >>> try:
        ...     service = container.get("service")
        ... except LazyInjectionError as e:
        ...     print(f"DI error: {e}")
    """

    pass


class InvalidConstructionError(LazyInjectionError):
    """
    Raised when a module is constructed directly.

    ``LazyInjectionModule`` instances are only produced by ``define()``,
    by the builder methods of an existing module, and by
    ``LazyInjectionContainer.create_child()``.

    Solution:
        Start from ``define()``::

            module = define().add("db", lambda c: Database())
    """

    pass


class DuplicateDefinitionError(LazyInjectionError):
    """
    Raised when a key is added that is already resolvable.

    ``add()`` and ``add_transient()`` reject keys that are registered in the
    module itself or resolvable through its parent container.

    Common causes:
        - Adding the same key twice in one chain
        - Adding a key to a child module that the parent already provides

    Solution:
        Use ``override()`` to deliberately replace or shadow a key::

            mocked = module.override("db", lambda c: FakeDatabase())
    """

    pass


class DefinitionNotFoundError(LazyInjectionError):
    """
    Raised when a requested key is not resolvable in the container chain.

    Common causes:
        - Forgetting to ``add()`` the key
        - Typo in the key
        - Resolving a child-only key from the parent container

    Note:
        The error message includes the resolvable keys
        to help identify available services.
    """

    pass


class CircularDependencyError(LazyInjectionError):
    """
    Raised when a factory requests its own key while being constructed.

    This happens when the factory for ``a`` asks for ``b``, and the factory
    for ``b`` (directly or indirectly) asks for ``a`` again before ``a`` has
    been created.

    Example of circular dependency::

        define() \\
            .add("a", lambda c: ServiceA(c.get("b"))) \\
            .add("b", lambda c: ServiceB(c.get("a")))  # Circular!

    Solution:
        1. Refactor to remove the circular dependency
        2. Resolve lazily: pass the container and call ``get()`` later
        3. Extract common functionality to a third service
    """

    pass


class AsyncDisposalRequiredError(LazyInjectionError):
    """
    Raised when ``dispose()`` finds a service that only supports ``aclose()``.

    Synchronous disposal cannot await an asynchronous close. Nothing is
    disposed when this error is raised, so the container can still be
    disposed asynchronously afterwards.

    Solution:
        Use ``async with`` or ``dispose_async()``::

            async with module.finalize() as container:
                client = container.get("client")
    """

    pass


class ContainerClosedError(LazyInjectionError):
    """
    Raised when attempting to use a disposed container.

    Common causes:
        - Calling ``get()`` after ``dispose()`` or ``dispose_async()``
        - Using a container after exiting its ``with`` block

    Solution:
        Finalize the module again to get a fresh container::

            container = module.finalize()
    """

    pass
