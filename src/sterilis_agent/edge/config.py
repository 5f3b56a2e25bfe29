"""
Edge Agent Configuration.
"""

import dataclasses
import os
import socket
from dataclasses import dataclass, field
from typing import Any, Optional
import yaml

from ..config import settings
from .exceptions import ConfigurationError


@dataclass
class MetadataProcessorConfig:
    """Portal metadata processor config."""
    portal_tags: list[str] = field(default_factory=list)
    timeout: float = field(default_factory=lambda: settings.metadata_timeout)  # seconds
    fail_on_fetch_error: bool = field(default_factory=lambda: settings.metadata_fail_on_error)

    def __post_init__(self):
        if self.portal_tags is None:
            self.portal_tags = []
        if not isinstance(self.portal_tags, (list, tuple)):
            raise ConfigurationError(
                "portal_tags must be a list of tag names",
                {"portal_tags": self.portal_tags},
            )
        self.portal_tags = [str(tag) for tag in self.portal_tags]
        if not isinstance(self.fail_on_fetch_error, bool):
            raise ConfigurationError(
                "fail_on_fetch_error must be true or false",
                {"fail_on_fetch_error": self.fail_on_fetch_error},
            )
        try:
            self.timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ConfigurationError("timeout must be a number", {"timeout": self.timeout})
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive", {"timeout": self.timeout})

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "MetadataProcessorConfig":
        """Create config from a processor options mapping."""
        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(
                "metadata processor options must be a mapping",
                {"options": data},
            )
        data = dict(data or {})
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown metadata processor options: {', '.join(unknown)}",
                {"unknown": unknown},
            )
        return cls(**data)


@dataclass
class EdgeConfig:
    """Main Edge Agent configuration."""
    # Agent identity
    agent_id: str = field(default_factory=lambda: socket.gethostname())

    # Processors, keyed by registry name, in the order they run
    processors: dict[str, dict] = field(default_factory=dict)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, path: str) -> "EdgeConfig":
        """Load configuration from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls._from_dict(data or {})

    @classmethod
    def from_env(cls) -> "EdgeConfig":
        """Load configuration from environment variables.

        ``STERILIS_PORTAL_TAGS`` is a comma separated list that enables the
        metadata processor.
        """
        config = cls()

        if os.getenv("STERILIS_AGENT_ID"):
            config.agent_id = os.getenv("STERILIS_AGENT_ID")
        if os.getenv("STERILIS_LOG_LEVEL"):
            config.log_level = os.getenv("STERILIS_LOG_LEVEL")
        if os.getenv("STERILIS_LOG_FILE"):
            config.log_file = os.getenv("STERILIS_LOG_FILE")
        if os.getenv("STERILIS_PORTAL_TAGS"):
            tags = [t.strip() for t in os.getenv("STERILIS_PORTAL_TAGS").split(",") if t.strip()]
            config.processors["metadata"] = {"portal_tags": tags}

        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "EdgeConfig":
        """Create config from dictionary."""
        config = cls()

        for key in ["agent_id", "log_level", "log_file"]:
            if key in data:
                setattr(config, key, data[key])

        if "processors" in data:
            processors = data["processors"] or {}
            if not isinstance(processors, dict):
                raise ConfigurationError(
                    "processors must be a mapping of name to options",
                    {"processors": processors},
                )
            config.processors = {}
            for name, opts in processors.items():
                if opts is not None and not isinstance(opts, dict):
                    raise ConfigurationError(
                        f"options for processor {name} must be a mapping",
                        {"processor": name, "options": opts},
                    )
                config.processors[name] = dict(opts or {})

        return config

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, 'w') as f:
            yaml.dump(dataclasses.asdict(self), f, default_flow_style=False, sort_keys=False)
