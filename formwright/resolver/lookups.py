# formwright/resolver/lookups.py
"""
Option lookups for cascading fields.

A lookup is any async callable ``lookup(field_name, upstream)`` returning
option-like items, where ``upstream`` maps each dependsOn name to its
current value (in dependsOn order). Option-like items are mappings with
value/label keys, (value, label) pairs, FieldOption instances or bare
scalars.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from formwright.models.errors import DependencyLookupFailure
from formwright.models.schema import FieldOption

if TYPE_CHECKING:
    from formwright.config.schema import LookupConfig

logger = logging.getLogger(__name__)

OptionLookup = Callable[[str, dict[str, Any]], Awaitable[Iterable[Any]]]

RETRYABLE_STATUSES = {408, 429, 500, 502, 503, 504}


def normalize_options(items: Iterable[Any]) -> list[FieldOption]:
    """
    Convert lookup results into an ordered option list.

    Ids are assigned by position ("1", "2", ...). Items without a value and
    repeated values are skipped; the first occurrence wins.

    Args:
        items: Option-like items in display order

    Returns:
        List of FieldOption with unique values
    """
    options: list[FieldOption] = []
    seen: set[str] = set()

    for item in items:
        if isinstance(item, FieldOption):
            value, label = item.value, item.label
        elif isinstance(item, Mapping):
            value = item.get("value", item.get("id"))
            label = item.get("label", item.get("name", value))
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            value, label = item
        else:
            value, label = item, item

        if value is None:
            continue
        value = str(value)
        if value in seen:
            continue
        seen.add(value)

        position = len(options) + 1
        options.append(
            FieldOption(id=str(position), value=value, label=str(label), order=position)
        )

    return options


class MappingOptionLookup:
    """
    In-process lookup backed by a nested mapping.

    ``table[field_name][upstream_key]`` holds the option items, where
    upstream_key is the tuple of upstream values. Single-upstream fields
    may use the bare value as key.
    """

    def __init__(self, table: Mapping[str, Mapping[Any, Iterable[Any]]]) -> None:
        self._table = table

    async def __call__(self, field_name: str, upstream: dict[str, Any]) -> list[Any]:
        choices = self._table.get(field_name)
        if choices is None:
            raise DependencyLookupFailure(field_name, upstream, "no options table for field")

        key = tuple(upstream.values())
        if key in choices:
            return list(choices[key])
        if len(key) == 1 and key[0] in choices:
            return list(choices[key[0]])
        raise DependencyLookupFailure(field_name, upstream, "not found")


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - transport errors (connect/read failures, timeouts)
    - HTTP status in RETRYABLE_STATUSES
    """
    if isinstance(exception, httpx.TransportError):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUSES
    return False


class HttpOptionLookup:
    """
    Lookup that fetches options from an HTTP API.

    Each cascading field maps to a URL path template whose placeholders are
    its upstream field names, e.g. "/teachers/{teacher_id}/classes".
    Responses may be a JSON list or an object with a "data" list.
    """

    def __init__(
        self,
        base_url: str,
        endpoints: Mapping[str, str],
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize HTTP lookup.

        Args:
            base_url: API base URL
            endpoints: Field name -> URL path template
            timeout: Request timeout in seconds
            max_attempts: Attempts per lookup on transient errors
            backoff: Exponential backoff multiplier in seconds (0 disables waiting)
            client: Optional pre-built client (tests pass one with a mock transport)
        """
        self._endpoints = dict(endpoints)
        self._max_attempts = max_attempts
        self._backoff = backoff
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __call__(self, field_name: str, upstream: dict[str, Any]) -> list[Any]:
        template = self._endpoints.get(field_name)
        if template is None:
            raise DependencyLookupFailure(field_name, upstream, "no endpoint configured")

        try:
            path = template.format(
                **{name: quote(str(value), safe="") for name, value in upstream.items()}
            )
        except KeyError as e:
            raise DependencyLookupFailure(
                field_name, upstream, f"endpoint placeholder {e} has no upstream value"
            ) from e

        try:
            response = await self._get(path)
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise DependencyLookupFailure(
                field_name, upstream, f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise DependencyLookupFailure(field_name, upstream, str(e)) from e

        if isinstance(payload, Mapping):
            payload = payload.get("data", payload.get("results"))
        if not isinstance(payload, list):
            raise DependencyLookupFailure(field_name, upstream, "response is not a list")
        return payload

    async def _get(self, path: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff, max=5),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                response = await self._client.get(path)
                response.raise_for_status()
        return response

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpOptionLookup":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    @classmethod
    def from_config(cls, config: "LookupConfig") -> "HttpOptionLookup":
        """
        Create HttpOptionLookup from LookupConfig.

        Raises:
            ValueError: If config.base_url is not set
        """
        if not config.base_url:
            raise ValueError("lookup.base_url is not configured")
        return cls(
            base_url=config.base_url,
            endpoints=config.endpoints,
            timeout=config.timeout,
            max_attempts=config.max_attempts,
        )
