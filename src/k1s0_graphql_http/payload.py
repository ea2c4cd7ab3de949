"""GraphQL request payload construction."""

from __future__ import annotations

import json
from typing import Any

from .exceptions import GraphQlClientError, GraphQlClientErrorCodes
from .types import OPERATION_NAME_FIELD, QUERY_FIELD, VARIABLES_FIELD, GraphQlRequest


def require_request(request: GraphQlRequest | None) -> GraphQlRequest:
    if request is None:
        raise GraphQlClientError(
            code=GraphQlClientErrorCodes.INVALID_ARGUMENT,
            message="request must not be None",
        )
    return request


def build_payload(request: GraphQlRequest | None) -> dict[str, Any]:
    """Build the JSON payload of a GraphQL request.

    ``operationName`` and ``query`` are left out when blank, ``variables``
    when empty.
    """
    request = require_request(request)
    payload: dict[str, Any] = {}
    if request.operation_name:
        payload[OPERATION_NAME_FIELD] = request.operation_name
    if request.query:
        payload[QUERY_FIELD] = request.query
    if request.variables:
        payload[VARIABLES_FIELD] = dict(request.variables)
    return payload


def build_query_params(request: GraphQlRequest | None) -> dict[str, str]:
    """Build URL query parameters for a GraphQL GET request."""
    payload = build_payload(request)
    if VARIABLES_FIELD in payload:
        payload[VARIABLES_FIELD] = encode_payload(payload[VARIABLES_FIELD]).decode("utf-8")
    return payload


def encode_payload(payload: dict[str, Any]) -> bytes:
    try:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise GraphQlClientError(
            code=GraphQlClientErrorCodes.INVALID_ARGUMENT,
            message=f"Request payload is not JSON serializable: {e}",
            cause=e,
        ) from e
    return text.encode("utf-8")
