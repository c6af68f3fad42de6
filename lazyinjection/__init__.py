# Public API
from .api import define
from .container import LazyInjectionContainer
from .definition import Registration
from .disposable import AsyncDisposable, Disposable
from .exceptions import (
    AsyncDisposalRequiredError,
    CircularDependencyError,
    ContainerClosedError,
    DefinitionNotFoundError,
    DuplicateDefinitionError,
    InvalidConstructionError,
    LazyInjectionError,
)
from .lifecycle import LazyInjectionLifeCycle
from .module import LazyInjectionModule

__all__ = [
    "define",
    "LazyInjectionModule",
    "LazyInjectionContainer",
    "LazyInjectionLifeCycle",
    "Registration",
    # Disposal capabilities
    "Disposable",
    "AsyncDisposable",
    # Exceptions
    "LazyInjectionError",
    "InvalidConstructionError",
    "DuplicateDefinitionError",
    "DefinitionNotFoundError",
    "CircularDependencyError",
    "AsyncDisposalRequiredError",
    "ContainerClosedError",
]

__version__ = "0.1.0"
