"""Sterilis edge agent: Portal metadata enrichment for telemetry metrics."""

__version__ = "1.0.0"
