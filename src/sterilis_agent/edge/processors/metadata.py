"""
Portal Metadata Processor.

Fetches the Portal metadata document once from the instance metadata
endpoint and attaches a configured subset of its fields as tags to every
metric passing through the pipeline.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Optional, Sequence, Union
import aiohttp
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator

from ..config import MetadataProcessorConfig
from ..exceptions import ConfigurationError, DecodeError, FetchError, ProcessorNotReadyError
from . import registry
from .base import Processor

logger = logging.getLogger(__name__)

METADATA_URL = "http://169.254.169.254/metrics/metadata"

DEFAULT_TIMEOUT = 10.0  # seconds

SAMPLE_CONFIG = """
  ## Available tags to attach to metrics:
  ## * id
  ## * cycle
  ## * device_config
  ## * grind_cycle
  ## * steam_cycle
  ## * start_time
  ## * end_time
  ## * completed
  ## * successful
  portal_tags = [ "id", "grind_cycle", "steam_cycle" ]

  ## Request timeout for the metadata fetch, in seconds.
  # timeout = 10

  ## Abort startup instead of continuing with empty metadata
  ## when the fetch or decode fails.
  # fail_on_fetch_error = false
"""


class PortalMetadata(BaseModel):
    """Portal metadata document served by the metadata endpoint.

    Every field is a JSON string; absent or null fields are empty.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: StrictStr = ""
    cycle: StrictStr = ""
    device_config: StrictStr = ""
    grind_cycle: StrictStr = ""
    steam_cycle: StrictStr = ""
    waste_type: StrictStr = ""
    type: StrictStr = ""
    start_time: StrictStr = ""
    end_time: StrictStr = ""
    completed: StrictStr = ""
    successful: StrictStr = ""

    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def pretty(self) -> str:
        """Indented JSON rendering for debug logs."""
        return self.model_dump_json(indent=4)


# waste_type and type are part of the document but are not exposed as tags.
TAG_FIELDS = {
    "id": attrgetter("id"),
    "cycle": attrgetter("cycle"),
    "device_config": attrgetter("device_config"),
    "grind_cycle": attrgetter("grind_cycle"),
    "steam_cycle": attrgetter("steam_cycle"),
    "start_time": attrgetter("start_time"),
    "end_time": attrgetter("end_time"),
    "completed": attrgetter("completed"),
    "successful": attrgetter("successful"),
}


def tag_value(metadata: PortalMetadata, tag: str) -> str:
    """Value for ``tag`` from the document, or "" for unmapped tags."""
    accessor = TAG_FIELDS.get(tag)
    if accessor is None:
        return ""
    return accessor(metadata)


class FetchStatus(Enum):
    """Outcome of the startup metadata fetch."""
    OK = "ok"
    DEGRADED = "degraded"  # fetch/decode failed, empty document in use
    FAILED = "failed"  # fetch/decode failed, startup aborted


@dataclass(frozen=True)
class FetchResult:
    """Result of a metadata fetch."""
    status: FetchStatus
    metadata: PortalMetadata
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.OK


def decode_metadata(body: Union[bytes, str]) -> PortalMetadata:
    """Decode a response body into a PortalMetadata document."""
    try:
        data = json.loads(body)
    except ValueError as e:
        raise DecodeError("Can not unmarshal JSON", {"error": str(e)}) from e

    if not isinstance(data, dict):
        raise DecodeError(
            "Metadata response is not a JSON object",
            {"type": type(data).__name__},
        )

    try:
        return PortalMetadata.model_validate(data)
    except ValidationError as e:
        raise DecodeError(
            "Metadata response has invalid fields",
            {"errors": [err["loc"][0] for err in e.errors() if err.get("loc")]},
        ) from e


async def fetch_metadata(
    url: str = METADATA_URL,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[aiohttp.ClientSession] = None,
) -> PortalMetadata:
    """
    GET the metadata document.

    Raises FetchError on transport failure, timeout or a non-2xx status and
    DecodeError on a malformed body. A session passed in is left open.
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession(timeout=client_timeout)

    try:
        async with session.get(url, timeout=client_timeout) as response:
            if not 200 <= response.status < 300:
                raise FetchError(
                    f"Metadata endpoint returned HTTP {response.status}",
                    {"url": url, "status": response.status},
                )
            body = await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(
            "No response from metadata endpoint",
            {"url": url, "error": str(e) or type(e).__name__},
        ) from e
    finally:
        if owns_session:
            await session.close()

    return decode_metadata(body)


class MetadataProcessor(Processor):
    """Attach Portal metadata to metrics."""

    name = "metadata"

    def __init__(
        self,
        portal_tags: Sequence[str] = (),
        timeout: float = DEFAULT_TIMEOUT,
        fail_on_fetch_error: bool = False,
        log: Optional[logging.Logger] = None,
    ):
        self.portal_tags = tuple(portal_tags)
        self.timeout = timeout
        self.fail_on_fetch_error = fail_on_fetch_error
        self.log = log or logger

        self._metadata: Optional[PortalMetadata] = None
        self.fetch_result: Optional[FetchResult] = None

    @classmethod
    def from_config(
        cls,
        config: MetadataProcessorConfig,
        log: Optional[logging.Logger] = None,
    ) -> "MetadataProcessor":
        return cls(
            portal_tags=config.portal_tags,
            timeout=config.timeout,
            fail_on_fetch_error=config.fail_on_fetch_error,
            log=log,
        )

    def sample_config(self) -> str:
        return SAMPLE_CONFIG

    def description(self) -> str:
        return "Attach Portal metadata to metrics"

    @property
    def ready(self) -> bool:
        return self._metadata is not None

    @property
    def metadata(self) -> Optional[PortalMetadata]:
        """The document in use, None until init() completes."""
        return self._metadata

    async def init(self) -> FetchResult:
        """
        Validate configuration and fetch the metadata document once.

        A failed fetch or decode is logged and replaced by an empty document
        unless ``fail_on_fetch_error`` is set, in which case the error is
        raised after recording a FAILED result.
        """
        self.log.debug("Initializing Portal Metadata Processor")
        if not self.portal_tags:
            raise ConfigurationError("no tags specified in configuration")

        try:
            metadata = await fetch_metadata(METADATA_URL, timeout=self.timeout)
            result = FetchResult(FetchStatus.OK, metadata)
        except (FetchError, DecodeError) as e:
            if self.fail_on_fetch_error:
                self.fetch_result = FetchResult(FetchStatus.FAILED, PortalMetadata(), e.message)
                self.log.error(f"Portal metadata unavailable: {e.to_dict()}")
                raise
            self.log.warning(f"Portal metadata unavailable, continuing without tags: {e.to_dict()}")
            result = FetchResult(FetchStatus.DEGRADED, PortalMetadata(), e.message)

        self.fetch_result = result
        self._metadata = result.metadata
        self.log.debug(self._metadata.pretty())
        return result

    def apply(self, *metrics) -> list:
        if self._metadata is None:
            raise ProcessorNotReadyError("apply() called before init()")

        for metric in metrics:
            for tag in self.portal_tags:
                self.log.debug(f"checking tag={tag}")
                value = tag_value(self._metadata, tag)
                if value:
                    self.log.debug(f"adding tag={tag} value={value}")
                    metric.add_tag(tag, value)
        return list(metrics)


def _create(options: Optional[dict[str, Any]] = None) -> MetadataProcessor:
    return MetadataProcessor.from_config(MetadataProcessorConfig.from_dict(options))


registry.add(MetadataProcessor.name, _create)
