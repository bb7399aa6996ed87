"""Retrieve news entries from the Contentful Content Delivery API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any

import httpx

from .config import SourceConfig
from .errors import AuthorizationError, EnvironmentsExhaustedError, FetchError

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = frozenset({401, 403})


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Raw delivery payload and the environment that produced it."""

    payload: dict[str, Any]
    environment: str

    @property
    def item_count(self) -> int:
        items = self.payload.get("items")
        return len(items) if isinstance(items, list) else 0


class ContentFetcher:
    """Try each candidate environment in order until one answers with HTTP 200.

    Usage:
        with ContentFetcher(config.source) as fetcher:
            result = fetcher.fetch()
    """

    def __init__(
        self,
        settings: SourceConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.Client(
            base_url=settings.api_host,
            timeout=settings.timeout,
            transport=transport,
        )

    def __enter__(self) -> "ContentFetcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> FetchResult:
        """Fetch entries from the first environment that succeeds.

        Raises:
            ConfigurationError: If the space identifier or access token is missing.
            AuthorizationError: On 401/403; remaining environments are not tried.
            EnvironmentsExhaustedError: If every candidate answered with another status.
            FetchError: On transport failures (timeouts, connection errors).
        """
        settings = self._settings
        settings.require_credentials()
        candidates = settings.environment_candidates

        for environment in candidates:
            path = self._entries_path(environment)
            logger.info("Trying environment '%s' -> %s%s", environment, settings.api_host, path)
            try:
                response = self._client.get(
                    path,
                    params=self._query_params(),
                    headers={"Authorization": f"Bearer {settings.access_token}"},
                )
            except httpx.HTTPError as exc:
                raise FetchError(f"Request to environment '{environment}' failed: {exc}") from exc

            logger.info("HTTP %d for environment '%s'", response.status_code, environment)
            if response.status_code == httpx.codes.OK:
                payload = self._decode(response, environment)
                result = FetchResult(payload=payload, environment=environment)
                logger.info("Using environment '%s'", environment)
                logger.info("Items returned: %d", result.item_count)
                return result
            if response.status_code in AUTH_FAILURE_STATUSES:
                raise AuthorizationError(environment, response.status_code)

        raise EnvironmentsExhaustedError(candidates, settings.content_type)

    def _entries_path(self, environment: str) -> str:
        return f"/spaces/{self._settings.space_id}/environments/{environment}/entries"

    def _query_params(self) -> dict[str, str | int]:
        settings = self._settings
        return {
            "content_type": settings.content_type,
            "order": "-fields.date",
            "include": settings.include,
            "limit": settings.limit,
        }

    @staticmethod
    def _decode(response: httpx.Response, environment: str) -> dict[str, Any]:
        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise FetchError(f"Environment '{environment}' returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise FetchError(f"Environment '{environment}' returned a non-object payload.")
        return payload


def fetch_entries(settings: SourceConfig) -> FetchResult:
    """Fetch entries with a short-lived client."""
    with ContentFetcher(settings) as fetcher:
        return fetcher.fetch()


def load_payload(path: Path) -> dict[str, Any]:
    """Read a payload previously saved with `save_payload`."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise FetchError(f"Payload file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise FetchError(f"Payload file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise FetchError(f"Payload file {path} must contain a JSON object.")
    return payload


def save_payload(result: FetchResult, path: Path) -> Path:
    """Persist a fetched payload so later builds can run offline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
