"""Elapsed-time measurement in whole seconds."""

import time
from dataclasses import dataclass, field


@dataclass
class Duration:
    """Time since creation, measured on the monotonic clock."""

    start_time: float = field(default_factory=time.monotonic)

    def elapsed(self) -> int:
        """Whole seconds elapsed since creation."""
        return int(time.monotonic() - self.start_time)
