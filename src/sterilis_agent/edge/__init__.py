"""
Sterilis Edge Agent - metric processors for the telemetry agent.

Enriches metrics with device and cycle metadata before they are shipped
off the instance.
"""

from .config import EdgeConfig, MetadataProcessorConfig
from .metrics import MetricPoint
from .pipeline import ProcessorChain
from .processors import MetadataProcessor, PortalMetadata

__all__ = [
    "EdgeConfig",
    "MetadataProcessorConfig",
    "MetricPoint",
    "ProcessorChain",
    "MetadataProcessor",
    "PortalMetadata",
]
