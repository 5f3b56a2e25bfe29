"""
Processor base class.

A processor is a pipeline stage that enriches metrics in place without
changing their count or order. The host constructs it, awaits ``init()``
once, then calls ``apply()`` for every batch.
"""

from typing import Any


class Processor:
    """Base class for metric processors."""

    name: str = ""

    def sample_config(self) -> str:
        """Return a commented sample configuration block."""
        return ""

    def description(self) -> str:
        """Return a one-line description."""
        return ""

    async def init(self) -> Any:
        """Prepare the processor. Called once before the first apply()."""
        return None

    def apply(self, *metrics) -> list:
        """Process a batch and return it."""
        return list(metrics)
