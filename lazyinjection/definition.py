"""
Registration

Data class representing a service registration
"""

from dataclasses import dataclass
from typing import Any, Callable, Hashable

from .lifecycle import LazyInjectionLifeCycle


# Service key: usually a string name
Key = Hashable

# Factory: receives the container it is resolved in
Factory = Callable[[Any], Any]


@dataclass(frozen=True)
class Registration:
    """Factory registered at one key"""
    factory: Factory
    lifecycle: LazyInjectionLifeCycle = LazyInjectionLifeCycle.MEMOIZED

    @property
    def is_transient(self) -> bool:
        return self.lifecycle == LazyInjectionLifeCycle.TRANSIENT
