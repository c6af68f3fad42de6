"""
LazyInjectionLifeCycle Enum

Defines how long a resolved service lives in its container
"""

from enum import Enum


class LazyInjectionLifeCycle(Enum):
    """Lifecycle of services"""
    MEMOIZED = "MEMOIZED"
    TRANSIENT = "TRANSIENT"
