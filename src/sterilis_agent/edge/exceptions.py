"""
Edge processor errors.

Every error carries a stable ``code``, a human readable ``message`` and a
``details`` dict so hosts can log or surface them uniformly.
"""

from typing import Any, Optional


class ProcessorError(Exception):
    """Base exception for edge processors."""

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a log/JSON friendly dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ProcessorError):
    """Invalid or missing processor configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class FetchError(ProcessorError):
    """The metadata endpoint could not be reached or answered non-2xx."""

    def __init__(self, message: str = "Metadata fetch failed", details: Optional[dict[str, Any]] = None):
        super().__init__("FETCH_ERROR", message, details)


class DecodeError(ProcessorError):
    """The metadata response body is not a valid document."""

    def __init__(self, message: str = "Metadata decode failed", details: Optional[dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class ProcessorNotReadyError(ProcessorError):
    """apply() was called before init() completed."""

    def __init__(self, message: str = "Processor not initialized", details: Optional[dict[str, Any]] = None):
        super().__init__("NOT_READY", message, details)


class UnknownProcessorError(ProcessorError):
    """No processor is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(
            "UNKNOWN_PROCESSOR",
            f"Unknown processor: {name}",
            {"name": name},
        )
