"""GraphQL client implementations."""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any

import httpx
import structlog

from .config import GraphQlClientConfig
from .exceptions import GraphQlClientError, GraphQlClientErrorCodes, GraphQlException
from .payload import build_payload, build_query_params, encode_payload, require_request
from .response import parse_response
from .types import GraphQlRequest, GraphQlResponse

logger = structlog.wrap_logger(
    logging.getLogger(__name__),
    wrapper_class=structlog.stdlib.BoundLogger,
)

FALLBACK_MEDIA_TYPE = "application/json"


class ClientOwnership(Enum):
    """Whether the GraphQL client closes the underlying httpx client."""

    OWNED = auto()
    BORROWED = auto()


class GraphQlClient(ABC):
    """Abstract GraphQL client."""

    @abstractmethod
    async def execute(
        self, request: GraphQlRequest, data_type: Any = None
    ) -> GraphQlResponse[Any]: ...

    @abstractmethod
    async def execute_mutation(
        self, mutation: GraphQlRequest, data_type: Any = None
    ) -> GraphQlResponse[Any]: ...


class HttpGraphQlClient(GraphQlClient):
    """GraphQL over HTTP client built on httpx.

    Without ``http_client`` an ``httpx.AsyncClient`` is created from
    ``config`` and closed by ``aclose()``. A supplied ``http_client`` is
    borrowed and left open unless ``ownership=ClientOwnership.OWNED`` is
    passed.

    Usage::

        async with HttpGraphQlClient() as client:
            response = await client.post_query(
                "https://example.com/graphql",
                GraphQlRequest(query="{ ping }"),
            )
    """

    def __init__(
        self,
        config: GraphQlClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        ownership: ClientOwnership | None = None,
    ) -> None:
        self._config = config or GraphQlClientConfig()
        if http_client is None:
            if ownership is ClientOwnership.BORROWED:
                raise GraphQlClientError(
                    code=GraphQlClientErrorCodes.INVALID_ARGUMENT,
                    message="a borrowed client requires http_client",
                )
            http_client = httpx.AsyncClient(
                headers=self._config.headers,
                timeout=self._config.timeout_seconds,
            )
            ownership = ClientOwnership.OWNED
        self._http_client = http_client
        self._ownership = ownership or ClientOwnership.BORROWED
        self._closed = False

    @property
    def ownership(self) -> ClientOwnership:
        return self._ownership

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> HttpGraphQlClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the client. The httpx client is closed only when owned."""
        if self._closed:
            return
        self._closed = True
        if self._ownership is ClientOwnership.OWNED:
            await self._http_client.aclose()

    async def execute(
        self, request: GraphQlRequest, data_type: Any = None
    ) -> GraphQlResponse[Any]:
        """Send a query to the configured endpoint with the configured method."""
        if self._config.method.upper() == "GET":
            return await self.get_query(self._config.endpoint, request, data_type=data_type)
        return await self.post_query(self._config.endpoint, request, data_type=data_type)

    async def execute_mutation(
        self, mutation: GraphQlRequest, data_type: Any = None
    ) -> GraphQlResponse[Any]:
        # Mutations are never sent with GET.
        return await self.post_query(self._config.endpoint, mutation, data_type=data_type)

    async def post_query(
        self,
        endpoint: str | httpx.URL,
        request: GraphQlRequest,
        *,
        media_type: str | None = None,
        cancel_event: asyncio.Event | None = None,
        data_type: Any = None,
    ) -> GraphQlResponse[Any]:
        """Send a GraphQL request as an HTTP POST and parse the response.

        Args:
            endpoint: GraphQL endpoint URL
            request: query, operation name and variables
            media_type: Content-Type of the body. Defaults to the configured
                media type; a blank value falls back to ``application/json``.
            cancel_event: aborts the in-flight request when set
            data_type: target type of the response ``data`` field

        Raises:
            GraphQlException: the server returned GraphQL errors
            GraphQlClientError: INVALID_ARGUMENT, TRANSPORT, MALFORMED_RESPONSE
                or CANCELLED
        """
        url = self._require_endpoint(endpoint)
        content = encode_payload(build_payload(request))
        if media_type is None:
            media_type = self._config.media_type
        headers = {"Content-Type": media_type if media_type.strip() else FALLBACK_MEDIA_TYPE}
        return await self._send(
            "POST", url, request, data_type, cancel_event, content=content, headers=headers
        )

    async def get_query(
        self,
        endpoint: str | httpx.URL,
        request: GraphQlRequest,
        *,
        cancel_event: asyncio.Event | None = None,
        data_type: Any = None,
    ) -> GraphQlResponse[Any]:
        """Send a GraphQL request as URL query parameters of an HTTP GET."""
        url = self._require_endpoint(endpoint)
        params = build_query_params(request)
        return await self._send("GET", url, request, data_type, cancel_event, params=params)

    def _require_endpoint(self, endpoint: str | httpx.URL | None) -> httpx.URL:
        if self._closed:
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.CLIENT_CLOSED,
                message="GraphQL client is already closed",
            )
        if endpoint is None or (isinstance(endpoint, str) and not endpoint.strip()):
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.INVALID_ARGUMENT,
                message="endpoint must not be empty",
            )
        try:
            return httpx.URL(endpoint)
        except (httpx.InvalidURL, TypeError) as e:
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.INVALID_ARGUMENT,
                message=f"Invalid endpoint: {endpoint!r}",
                cause=e,
            ) from e

    async def _send(
        self,
        method: str,
        url: httpx.URL,
        request: GraphQlRequest,
        data_type: Any,
        cancel_event: asyncio.Event | None,
        **kwargs: Any,
    ) -> GraphQlResponse[Any]:
        log = logger.bind(method=method, endpoint=str(url), operation_name=request.operation_name)
        log.debug("graphql.request")
        body = await self._exchange_cancellable(method, url, cancel_event, **kwargs)
        try:
            response = parse_response(body, data_type)
        except GraphQlException as e:
            log.warning("graphql.errors", error_count=len(e.errors))
            raise
        log.debug("graphql.response", has_data=response.has_data)
        return response

    async def _exchange_cancellable(
        self,
        method: str,
        url: httpx.URL,
        cancel_event: asyncio.Event | None,
        **kwargs: Any,
    ) -> bytes:
        if cancel_event is None:
            return await self._exchange(method, url, **kwargs)
        if cancel_event.is_set():
            raise _cancelled(method, url)

        exchange = asyncio.ensure_future(self._exchange(method, url, **kwargs))
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({exchange, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not exchange.done():
                exchange.cancel()
                await asyncio.wait({exchange})
        if exchange.cancelled():
            raise _cancelled(method, url)
        return exchange.result()

    async def _exchange(self, method: str, url: httpx.URL, **kwargs: Any) -> bytes:
        try:
            resp = await self._http_client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.TRANSPORT,
                message=f"{method} {url} failed: {e}",
                cause=e,
            ) from e
        if not resp.is_success:
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.TRANSPORT,
                message=f"{method} {url}: HTTP {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )
        return resp.content


def _cancelled(method: str, url: httpx.URL) -> GraphQlClientError:
    return GraphQlClientError(
        code=GraphQlClientErrorCodes.CANCELLED,
        message=f"{method} {url} was cancelled",
    )


class InMemoryGraphQlClient(GraphQlClient):
    """In-memory GraphQL client for testing.

    Registered bodies go through the same response parsing as the HTTP
    client, so an ``errors`` body raises ``GraphQlException``.
    """

    def __init__(self) -> None:
        self._responses: dict[str, str] = {}
        self._requests: list[GraphQlRequest] = []

    def set_response(self, operation_name: str, body: dict[str, Any] | str) -> None:
        """Register the raw JSON response body of an operation."""
        self._responses[operation_name] = body if isinstance(body, str) else json.dumps(body)

    @property
    def recorded_requests(self) -> list[GraphQlRequest]:
        return list(self._requests)

    async def execute(
        self, request: GraphQlRequest, data_type: Any = None
    ) -> GraphQlResponse[Any]:
        return self._resolve(request, data_type)

    async def execute_mutation(
        self, mutation: GraphQlRequest, data_type: Any = None
    ) -> GraphQlResponse[Any]:
        return self._resolve(mutation, data_type)

    def _resolve(self, request: GraphQlRequest, data_type: Any) -> GraphQlResponse[Any]:
        require_request(request)
        self._requests.append(request)
        if request.operation_name is None:
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.UNKNOWN_OPERATION,
                message="No operation name provided",
            )
        if request.operation_name not in self._responses:
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.OPERATION_NOT_FOUND,
                message=f"Operation not found: {request.operation_name}",
            )
        return parse_response(self._responses[request.operation_name], data_type)
