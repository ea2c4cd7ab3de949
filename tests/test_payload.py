"""Request payload unit tests."""

import json

import pytest

from k1s0_graphql_http import (
    GraphQlClientError,
    GraphQlClientErrorCodes,
    GraphQlRequest,
    build_payload,
    build_query_params,
    encode_payload,
)


def test_build_payload_all_fields() -> None:
    request = GraphQlRequest(
        query="query($id: ID!) { user(id: $id) { name } }",
        variables={"id": "123"},
        operation_name="GetUser",
    )
    assert build_payload(request) == {
        "operationName": "GetUser",
        "query": "query($id: ID!) { user(id: $id) { name } }",
        "variables": {"id": "123"},
    }


@pytest.mark.parametrize(
    "request_",
    [
        GraphQlRequest(),
        GraphQlRequest(query="", operation_name="  ", variables={}),
        GraphQlRequest(query=None, operation_name=None, variables=None),
    ],
)
def test_build_payload_omits_blank_and_empty(request_: GraphQlRequest) -> None:
    assert build_payload(request_) == {}


def test_build_payload_query_only() -> None:
    assert build_payload(GraphQlRequest(query="{ ping }")) == {"query": "{ ping }"}


def test_build_payload_after_blank_assignment() -> None:
    request = GraphQlRequest(query="{ ping }", operation_name="Ping")
    request.operation_name = "   "
    assert build_payload(request) == {"query": "{ ping }"}


def test_build_payload_none_request() -> None:
    with pytest.raises(GraphQlClientError) as exc_info:
        build_payload(None)
    assert exc_info.value.code == GraphQlClientErrorCodes.INVALID_ARGUMENT


def test_build_query_params_encodes_variables() -> None:
    params = build_query_params(
        GraphQlRequest(query="{ user(id: $id) { name } }", variables={"id": 1, "tags": ["a"]})
    )
    assert params["query"] == "{ user(id: $id) { name } }"
    assert json.loads(params["variables"]) == {"id": 1, "tags": ["a"]}
    assert "operationName" not in params


def test_encode_payload_is_compact_utf8() -> None:
    body = encode_payload({"query": "{ greet(name: \"日本\") }"})
    assert body == '{"query":"{ greet(name: \\"日本\\") }"}'.encode("utf-8")


def test_encode_payload_rejects_non_json_values() -> None:
    with pytest.raises(GraphQlClientError) as exc_info:
        encode_payload({"variables": {"when": object()}})
    assert exc_info.value.code == GraphQlClientErrorCodes.INVALID_ARGUMENT
    assert isinstance(exc_info.value.__cause__, TypeError)
