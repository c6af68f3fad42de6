"""
Public API

This module provides the entry point for declaring services.

Example::

    from lazyinjection import define

    module = (
        define()
        .add("db", lambda c: Database())
        .add("users", lambda c: UserService(c.get("db")))
    )

    with module.finalize() as container:
        users = container.get("users")
"""

from .module import LazyInjectionModule


def define() -> LazyInjectionModule:
    """Start a new module without a parent container.

    Returns:
        An empty LazyInjectionModule

    Example::

        container = define().add("clock", lambda c: SystemClock()).finalize()
    """
    return LazyInjectionModule._create({}, None)
