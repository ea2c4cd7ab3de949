"""GraphQL response parsing."""

from __future__ import annotations

import json
from typing import Any, TypeVar, overload

from pydantic import TypeAdapter, ValidationError

from .exceptions import GraphQlClientError, GraphQlClientErrorCodes, GraphQlException
from .types import DATA_FIELD, ERRORS_FIELD, GraphQlError, GraphQlResponse

T = TypeVar("T")


def parse_json_object(body: bytes | str) -> dict[str, Any]:
    """Parse a response body that must be a single JSON object."""
    try:
        parsed = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise GraphQlClientError(
            code=GraphQlClientErrorCodes.MALFORMED_RESPONSE,
            message=f"Response body is not valid JSON: {e}",
            cause=e,
        ) from e
    if not isinstance(parsed, dict):
        raise GraphQlClientError(
            code=GraphQlClientErrorCodes.MALFORMED_RESPONSE,
            message=f"Response body is not a JSON object: {type(parsed).__name__}",
        )
    return parsed


def _decode_errors(raw: Any) -> list[GraphQlError]:
    if isinstance(raw, dict):
        return [GraphQlError.from_dict(raw)]
    if isinstance(raw, list) and all(isinstance(entry, dict) for entry in raw):
        return [GraphQlError.from_dict(entry) for entry in raw]
    raise GraphQlClientError(
        code=GraphQlClientErrorCodes.MALFORMED_RESPONSE,
        message=f"Invalid errors field: {raw!r}",
    )


def _decode_data(raw: Any, data_type: Any) -> Any:
    if data_type is None or raw is None:
        return raw
    try:
        return TypeAdapter(data_type).validate_python(raw)
    except ValidationError as e:
        raise GraphQlClientError(
            code=GraphQlClientErrorCodes.MALFORMED_RESPONSE,
            message=f"Response data does not match {data_type!r}: {e}",
            cause=e,
        ) from e


@overload
def parse_response(body: bytes | str) -> GraphQlResponse[Any]: ...


@overload
def parse_response(body: bytes | str, data_type: type[T]) -> GraphQlResponse[T]: ...


def parse_response(body: bytes | str, data_type: Any = None) -> GraphQlResponse[Any]:
    """Parse a GraphQL response body.

    A present ``errors`` field always wins over ``data``: the errors are raised
    as ``GraphQlException`` and any partial data is only reachable through
    ``GraphQlException.json_response``.

    Args:
        body: HTTP response body
        data_type: target type of the ``data`` field, validated with pydantic.
            ``None`` keeps the raw JSON value.

    Raises:
        GraphQlException: the response carries GraphQL errors
        GraphQlClientError: MALFORMED_RESPONSE if the body is not a JSON object
            or does not match the expected shape
    """
    json_response = parse_json_object(body)
    raw_errors = json_response.get(ERRORS_FIELD)
    if raw_errors is not None:
        raise GraphQlException(_decode_errors(raw_errors), json_response)
    if DATA_FIELD not in json_response:
        return GraphQlResponse()
    return GraphQlResponse(
        data=_decode_data(json_response[DATA_FIELD], data_type),
        additional_properties={
            k: v for k, v in json_response.items() if k not in (DATA_FIELD, ERRORS_FIELD)
        },
        has_data=True,
    )
