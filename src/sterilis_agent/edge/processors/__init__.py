"""
Sterilis Edge Agent Processors.

Each processor enriches metrics in place before they leave the agent.
Importing this package registers the built-in processors.
"""

from .base import Processor
from .registry import add, get, available, create
from .metadata import MetadataProcessor, PortalMetadata, FetchResult, FetchStatus

__all__ = [
    "Processor",
    "add",
    "get",
    "available",
    "create",
    "MetadataProcessor",
    "PortalMetadata",
    "FetchResult",
    "FetchStatus",
]
