"""Configuration for the sqs2http pipeline."""

import re
from collections.abc import Mapping
from typing import Annotated, Any
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

from sqs2http.exceptions import InvalidConfigurationError
from sqs2http.logger import logger

# SQS accepts at most 10 entries per receive or delete-batch call.
SQS_MAX_BATCH_SIZE = 10
SQS_MAX_VISIBILITY_TIMEOUT_SECS = 43200

SQS_HOST_REGION_PATTERN = re.compile(r"^sqs\.([a-z0-9-]+)\.amazonaws\.com(\.cn)?$")

DEFAULT_CONFIG: Mapping[str, Any] = {
    "delete_batch_size": 10,
    "delete_wait_msecs": 1000,
    "fetch_max_messages": 10,
    "fetch_wait_secs": 20,
    "fetch_visibility_timeout_secs": None,
    "post_content_type": "application/json",
    "post_max_connections": 4,
    "post_timeout_msecs": 180000,
    "aws_region": None,
}


def _ensure_http_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http:// or https:// URL with a host")
    return value


HttpUrlText = Annotated[str, AfterValidator(_ensure_http_url)]


class Configuration(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    fetch_max_messages: int = Field(ge=1, le=SQS_MAX_BATCH_SIZE)
    fetch_wait_secs: int = Field(ge=0)
    fetch_visibility_timeout_secs: int | None = Field(
        default=None, ge=1, le=SQS_MAX_VISIBILITY_TIMEOUT_SECS
    )
    delete_batch_size: int = Field(ge=1, le=SQS_MAX_BATCH_SIZE)
    delete_wait_msecs: int = Field(ge=0)
    post_url: HttpUrlText
    post_content_type: str = Field(min_length=1)
    post_timeout_msecs: int = Field(gt=0)
    post_max_connections: int = Field(gt=0)
    queue_url: HttpUrlText
    aws_region: str | None = None

    @property
    def region_name(self) -> str | None:
        """The configured region, else the one embedded in an AWS queue URL."""
        if self.aws_region:
            return self.aws_region

        host = urlparse(self.queue_url).hostname or ""
        match = SQS_HOST_REGION_PATTERN.match(host)
        if match:
            return match.group(1)

        return None


def _humanize(error: ValidationError) -> list[str]:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "config"
        messages.append(f"{location}: {detail['msg']}")
    return messages


def load_config(overrides: Mapping[str, Any] | None = None) -> Configuration:
    """Merges the defaults with caller overrides and validates the result.

    Keys may use dashes or underscores. Overrides set to None keep the
    default value.

    Raises:
        InvalidConfigurationError: when the merged configuration is invalid.
    """
    merged = dict(DEFAULT_CONFIG)
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        merged[key.replace("-", "_")] = value

    try:
        return Configuration.model_validate(merged)
    except ValidationError as e:
        errors = _humanize(e)
        logger.critical("Config is invalid", extra={"errors": errors})
        raise InvalidConfigurationError(errors) from e
