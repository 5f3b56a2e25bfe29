"""
Metric records passed through the processor chain.
"""

import time
from dataclasses import dataclass, field
from typing import Union


@dataclass
class MetricPoint:
    """A single metric point.

    Owned by the host pipeline. Processors borrow it for one apply() call
    and may only add tags.
    """
    name: str
    value: Union[int, float]
    timestamp: float = field(default_factory=time.time)
    tags: dict[str, str] = field(default_factory=dict)

    def add_tag(self, key: str, value: str) -> None:
        """Set a tag; an existing tag with the same key is overwritten."""
        self.tags[key] = value
