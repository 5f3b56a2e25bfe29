"""
Processor registry.

Processor modules register a factory under a short name when imported;
the host looks factories up by the names used in its configuration.
"""

import logging
from typing import Any, Callable, Optional

from ..exceptions import UnknownProcessorError
from .base import Processor

logger = logging.getLogger(__name__)

ProcessorFactory = Callable[[Optional[dict[str, Any]]], Processor]

_processors: dict[str, ProcessorFactory] = {}


def add(name: str, factory: ProcessorFactory) -> None:
    """Register a processor factory, replacing any previous one."""
    if name in _processors:
        logger.debug(f"Replacing processor factory: {name}")
    _processors[name] = factory


def get(name: str) -> ProcessorFactory:
    """Look up a processor factory by name."""
    try:
        return _processors[name]
    except KeyError:
        raise UnknownProcessorError(name) from None


def available() -> list[str]:
    """Names of all registered processors."""
    return sorted(_processors)


def create(name: str, options: Optional[dict[str, Any]] = None) -> Processor:
    """Build a processor from its configuration options."""
    return get(name)(options)
