"""Internal interfaces for Tunesmith server components.

Abstract Base Classes (ABCs) defining contracts for the composition store
and metrics collection.
"""

from server.interfaces.metrics import IMetricsCollector
from server.interfaces.store import ICompositionStore

__all__ = [
    "ICompositionStore",
    "IMetricsCollector",
]
