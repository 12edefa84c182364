"""
Error types for the power-of-two pair search.

The search itself is total over valid input; these exceptions cover the
edges around it: malformed value types, bad configuration and failures
escaping a worker thread.
"""

from typing import Optional, Any, Dict, List


class PowerPairsError(Exception):
    """
    Base exception for all powerpairs errors.

    Provides common functionality for error tracking and reporting.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PowerSumError(PowerPairsError, ValueError):
    """
    Raised when a pair or triplet does not sum to powers of two.
    """

    def __init__(self, message: str,
                 members: Optional[tuple] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize power sum error.

        Args:
            message: Error message
            members: The offending members, in the order given
            details: Additional error context
        """
        super().__init__(message, details)
        self.members = members
        self.details.update({'members': members})


class ConfigurationError(PowerPairsError):
    """
    Raised when a search configuration fails validation.
    """

    def __init__(self, message: str,
                 errors: Optional[List[str]] = None,
                 source: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            errors: Individual validation failures
            source: Where the configuration came from (file path, 'env', 'cli')
            details: Additional error context
        """
        super().__init__(message, details)
        self.errors = errors or []
        self.source = source
        self.details.update({
            'errors': self.errors,
            'source': source
        })


class WorkerError(PowerPairsError):
    """
    Raised after the worker pool joined when a worker thread failed.
    """

    def __init__(self, message: str,
                 worker_name: Optional[str] = None,
                 combiner_index: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize worker error.

        Args:
            message: Error message
            worker_name: Name of the thread that failed
            combiner_index: Index of the combiner being run, if known
            details: Additional error context
        """
        super().__init__(message, details)
        self.worker_name = worker_name
        self.combiner_index = combiner_index
        self.details.update({
            'worker_name': worker_name,
            'combiner_index': combiner_index
        })
