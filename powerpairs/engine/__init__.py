"""
Search engine: local improvement, combiners and the error hierarchy.

Only the errors are re-exported here; the core types depend on them, so the
improver and combiner modules are imported from their own paths.
"""

from .errors import (
    PowerPairsError,
    PowerSumError,
    ConfigurationError,
    WorkerError,
)

__all__ = [
    "PowerPairsError",
    "PowerSumError",
    "ConfigurationError",
    "WorkerError",
]
