"""
Processor Chain.

Builds the configured processors, initializes each one once, then runs
metric batches through them in configuration order.
"""

import logging
from typing import Optional

from .config import EdgeConfig
from .metrics import MetricPoint
from .processors import registry
from .processors.base import Processor
from ..utils.logger import get_logger

logger = logging.getLogger(__name__)


class ProcessorChain:
    """
    Ordered chain of processors.

    The chain holds no metric state; apply() hands the same batch to each
    processor in turn and returns it.
    """

    def __init__(self, processors: Optional[list[Processor]] = None):
        self.processors = list(processors or [])
        self._initialized = False

    @classmethod
    def from_config(cls, config: EdgeConfig) -> "ProcessorChain":
        """Create processors listed under ``processors`` in the config."""
        get_logger("sterilis_agent", level=config.log_level, log_file=config.log_file)
        logger.info(f"Building processor chain for agent {config.agent_id}")

        processors = []
        for name, options in config.processors.items():
            processors.append(registry.create(name, options))
            logger.info(f"Loaded processor: {name}")
        return cls(processors)

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def init(self) -> None:
        """Initialize every processor once, in order."""
        if self._initialized:
            return

        for processor in self.processors:
            logger.debug(f"Initializing processor: {processor.name}")
            await processor.init()

        self._initialized = True
        logger.info(f"Processor chain ready ({len(self.processors)} processors)")

    def apply(self, metrics: list[MetricPoint]) -> list[MetricPoint]:
        """Run a batch through every processor."""
        batch = list(metrics)
        for processor in self.processors:
            batch = processor.apply(*batch)
        return batch
