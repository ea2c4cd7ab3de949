"""k1s0 GraphQL over HTTP client library."""

from .client import ClientOwnership, GraphQlClient, HttpGraphQlClient, InMemoryGraphQlClient
from .config import DEFAULT_MEDIA_TYPE, GraphQlClientConfig
from .exceptions import GraphQlClientError, GraphQlClientErrorCodes, GraphQlException
from .introspection import INTROSPECTION_QUERY, introspection_request
from .logger import new_logger
from .payload import build_payload, build_query_params, encode_payload
from .response import parse_json_object, parse_response
from .types import GraphQlError, GraphQlLocation, GraphQlRequest, GraphQlResponse

__all__ = [
    "ClientOwnership",
    "DEFAULT_MEDIA_TYPE",
    "GraphQlClient",
    "GraphQlClientConfig",
    "GraphQlClientError",
    "GraphQlClientErrorCodes",
    "GraphQlError",
    "GraphQlException",
    "GraphQlLocation",
    "GraphQlRequest",
    "GraphQlResponse",
    "HttpGraphQlClient",
    "INTROSPECTION_QUERY",
    "InMemoryGraphQlClient",
    "build_payload",
    "build_query_params",
    "encode_payload",
    "introspection_request",
    "new_logger",
    "parse_json_object",
    "parse_response",
]
