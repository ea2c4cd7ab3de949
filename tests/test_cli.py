"""Introspection CLI tests (respx mocks)."""

import json

import httpx
import pytest
import respx

from k1s0_graphql_http import INTROSPECTION_QUERY
from k1s0_graphql_http.cli import main

ENDPOINT = "http://graphql-server:8080/graphql"

SCHEMA = {"__schema": {"queryType": {"name": "Query"}, "types": [], "directives": []}}


@respx.mock
def test_prints_introspection_response(capsys: pytest.CaptureFixture[str]) -> None:
    route = respx.post(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"data": SCHEMA, "extensions": {"cost": 1}})
    )
    assert main([ENDPOINT]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"data": SCHEMA, "extensions": {"cost": 1}}
    sent = json.loads(route.calls.last.request.content)
    assert sent == {"operationName": "IntrospectionQuery", "query": INTROSPECTION_QUERY}


@respx.mock
def test_get_method_and_headers(capsys: pytest.CaptureFixture[str]) -> None:
    route = respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json={"data": SCHEMA}))
    assert main([ENDPOINT, "--method", "get", "--header", "Authorization: Bearer abc"]) == 0
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.url.params["operationName"] == "IntrospectionQuery"
    assert json.loads(capsys.readouterr().out) == {"data": SCHEMA}


@respx.mock
def test_graphql_errors_exit_non_zero(capsys: pytest.CaptureFixture[str]) -> None:
    body = {"errors": [{"message": "introspection disabled"}]}
    respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json=body))
    assert main([ENDPOINT]) == 1
    captured = capsys.readouterr()
    assert json.loads(captured.out) == body
    assert "introspection disabled" in captured.err


@respx.mock
def test_http_error_exit_non_zero(capsys: pytest.CaptureFixture[str]) -> None:
    respx.post(ENDPOINT).mock(return_value=httpx.Response(503))
    assert main([ENDPOINT]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "TRANSPORT" in captured.err


def test_missing_uri_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2


def test_invalid_header_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([ENDPOINT, "--header", "no-separator"])
    assert exc_info.value.code == 2


@respx.mock
def test_environment_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("K1S0_GRAPHQL_METHOD", "GET")
    route = respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json={"data": SCHEMA}))
    assert main([ENDPOINT]) == 0
    assert route.call_count == 1


@pytest.mark.parametrize(
    ("name", "value"),
    [("K1S0_GRAPHQL_METHOD", "PUT"), ("K1S0_GRAPHQL_LOG_FORMAT", "xml")],
)
def test_invalid_environment_default_is_usage_error(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)
    with respx.mock(assert_all_called=False) as router:
        route = router.post(ENDPOINT).mock(return_value=httpx.Response(200, json={"data": SCHEMA}))
        with pytest.raises(SystemExit) as exc_info:
            main([ENDPOINT])
    assert exc_info.value.code == 2
    assert route.call_count == 0
