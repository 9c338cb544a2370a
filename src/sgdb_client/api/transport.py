"""
HTTP transport for the SteamGridDB API.

Builds one authenticated request per call, sends it, and folds the
outcome into a ``Success`` or ``Failure`` result. Nothing is retried
and no network exception escapes ``Transport.request``.
"""

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from sgdb_client.api.multipart import FieldValue, encode_multipart
from sgdb_client.api.results import (
    TRANSPORT_ERROR_STATUS,
    Failure,
    ResponseResult,
    Success,
)
from sgdb_client.config import Settings, get_settings
from sgdb_client.logger import get_logger

DEFAULT_TIMEOUT_SECONDS = 30.0


class TransportConfig(BaseModel):
    """Connection settings held by a single ``Transport``."""

    model_config = ConfigDict(frozen=True)

    base_uri: str
    auth_token: SecretStr
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    user_agent: str = "sgdb-client/0.1"

    @field_validator("base_uri")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Normalize the base URI so paths can be appended directly."""
        return v if v.endswith("/") else f"{v}/"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TransportConfig":
        """Build a transport config from application settings."""
        settings = settings or get_settings()
        return cls(
            base_uri=settings.sgdb.base_url,
            auth_token=settings.sgdb.api_key,
            timeout_seconds=settings.sgdb.timeout_seconds,
            user_agent=settings.sgdb.user_agent,
        )


class HTTPMethod(str, Enum):
    """Request shapes supported by the transport."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"
    POST_MULTIPART = "POST_MULTIPART"

    @property
    def verb(self) -> str:
        """HTTP verb sent on the wire."""
        return "POST" if self is HTTPMethod.POST_MULTIPART else self.value


@dataclass(frozen=True)
class RequestIntent:
    """A single request to issue: method, relative path and optional extras."""

    method: HTTPMethod
    path: str
    query: Mapping[str, str] | None = None
    multipart_fields: Mapping[str, FieldValue] | None = None

    def __post_init__(self) -> None:
        is_multipart = self.method is HTTPMethod.POST_MULTIPART
        if is_multipart and self.multipart_fields is None:
            raise ValueError("POST_MULTIPART requires multipart_fields")
        if not is_multipart and self.multipart_fields is not None:
            raise ValueError(f"multipart_fields not allowed for {self.method.value}")


class Transport:
    """
    Authenticated HTTP transport.

    One instance is created at startup and shared by every caller.
    The underlying ``httpx.Client`` is thread-safe; configuration swaps
    go through a lock so each request sees a consistent config.

    Example:
        >>> config = TransportConfig(base_uri="https://www.steamgriddb.com/api/v2", auth_token="KEY")
        >>> with Transport(config) as transport:
        ...     result = transport.get("games/steam/440")
        ...     if result.success:
        ...         print(result.payload["data"]["name"])
    """

    def __init__(
        self,
        config: TransportConfig,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            config: Base URI, token and timeout
            client: Pre-built HTTP client (created lazily if None)
        """
        self._config = config
        self._client = client
        self._lock = threading.Lock()
        self._logger = get_logger(
            self.__class__.__name__,
            component="transport",
        )

    @property
    def config(self) -> TransportConfig:
        """Current connection settings."""
        return self._config

    def configure(self, base_uri: str, auth_token: str) -> None:
        """Replace base URI and token; the timeout is kept."""
        with self._lock:
            self._config = TransportConfig(
                base_uri=base_uri,
                auth_token=SecretStr(auth_token),
                timeout_seconds=self._config.timeout_seconds,
                user_agent=self._config.user_agent,
            )
        self._logger.info("Transport reconfigured", base_uri=self._config.base_uri)

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        with self._lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.Client(
                    timeout=httpx.Timeout(self._config.timeout_seconds),
                    follow_redirects=True,
                    headers={
                        "User-Agent": self._config.user_agent,
                        "Accept": "application/json",
                    },
                )
            return self._client

    def close(self) -> None:
        """Close HTTP client and release resources."""
        with self._lock:
            if self._client is not None and not self._client.is_closed:
                self._client.close()
            self._client = None

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @staticmethod
    def build_url(config: TransportConfig, intent: RequestIntent) -> str:
        """Join base URI, path and the url-encoded query."""
        url = f"{config.base_uri}{intent.path}"
        if intent.query:
            url = f"{url}?{urlencode(intent.query, safe=',')}"
        return url

    def request(self, intent: RequestIntent) -> ResponseResult:
        """
        Send one request and classify the outcome.

        Args:
            intent: What to send

        Returns:
            ResponseResult: ``Success`` for HTTP 200, ``Failure`` otherwise

        Raises:
            OSError: If a multipart file part cannot be read
        """
        config = self._config
        url = self.build_url(config, intent)
        headers = {"Authorization": f"Bearer {config.auth_token.get_secret_value()}"}
        content: bytes | None = None

        if intent.method is HTTPMethod.POST_MULTIPART:
            # File read errors propagate from here, before any network I/O
            boundary, content = encode_multipart(intent.multipart_fields or {})
            headers["Content-Type"] = f"multipart/form-data; boundary={boundary}"
        elif intent.method is HTTPMethod.POST:
            content = b""

        self._logger.debug("Making request", method=intent.method.value, url=url)
        start_time = time.perf_counter()

        try:
            response = self.client.request(
                intent.method.verb,
                url,
                headers=headers,
                content=content,
                timeout=config.timeout_seconds,
            )
        except httpx.RequestError as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._logger.error(
                "Transport error",
                method=intent.method.value,
                url=url,
                error=repr(e),
            )
            return Failure(
                status_code=TRANSPORT_ERROR_STATUS,
                reason="transport error",
                endpoint=url,
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        return self._interpret(response, url, duration_ms)

    def _interpret(
        self,
        response: httpx.Response,
        url: str,
        duration_ms: float,
    ) -> ResponseResult:
        """Parse the body as JSON and classify on the status code."""
        status_code = response.status_code

        try:
            payload = response.json()
        except ValueError:
            self._logger.warning(
                "Response body is not JSON",
                url=url,
                status_code=status_code,
            )
            return Failure(
                status_code=status_code,
                reason="invalid JSON response",
                endpoint=url,
                duration_ms=duration_ms,
            )

        if status_code != 200:
            failure = Failure(
                status_code=status_code,
                reason=f"API error: {status_code}",
                payload=payload,
                endpoint=url,
                duration_ms=duration_ms,
            )
            self._logger.warning(
                "API error",
                url=url,
                status_code=status_code,
                errors=failure.errors,
            )
            return failure

        self._logger.info(
            "Request successful",
            url=url,
            duration_ms=round(duration_ms, 2),
        )
        return Success(
            status_code=status_code,
            payload=payload,
            endpoint=url,
            duration_ms=duration_ms,
        )

    def get(self, path: str, query: Mapping[str, str] | None = None) -> ResponseResult:
        """Issue a GET request."""
        return self.request(RequestIntent(HTTPMethod.GET, path, query=query))

    def post(self, path: str) -> ResponseResult:
        """Issue a POST request with an empty body."""
        return self.request(RequestIntent(HTTPMethod.POST, path))

    def post_multipart(
        self,
        path: str,
        fields: Mapping[str, FieldValue],
    ) -> ResponseResult:
        """Issue a multipart/form-data POST request."""
        return self.request(
            RequestIntent(HTTPMethod.POST_MULTIPART, path, multipart_fields=fields)
        )

    def delete(self, path: str) -> ResponseResult:
        """Issue a DELETE request."""
        return self.request(RequestIntent(HTTPMethod.DELETE, path))
