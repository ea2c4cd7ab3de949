"""Command-line tool that prints the introspection schema of a GraphQL endpoint."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Sequence
from typing import Any

from .client import HttpGraphQlClient
from .config import GraphQlClientConfig
from .exceptions import GraphQlClientError, GraphQlException
from .introspection import introspection_request
from .logger import new_logger
from .types import GraphQlResponse

ENV_PREFIX = "K1S0_GRAPHQL_"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

METHOD_CHOICES = ("POST", "GET")
LOG_FORMAT_CHOICES = ("json", "text")


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="k1s0-graphql-introspect",
        description="Fetch the schema of a GraphQL endpoint with the introspection query "
        "and print the response as JSON.",
    )
    parser.add_argument("uri", help="GraphQL endpoint")
    parser.add_argument(
        "--method",
        choices=METHOD_CHOICES,
        type=str.upper,
        default=_env("METHOD", "POST"),
        help=f"HTTP method (env: {ENV_PREFIX}METHOD, default: POST)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env("TIMEOUT", "10"),
        help=f"Request timeout in seconds (env: {ENV_PREFIX}TIMEOUT, default: 10)",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header, may be repeated",
    )
    parser.add_argument(
        "--log-level",
        default=_env("LOG_LEVEL", "WARNING"),
        help=f"Log level (env: {ENV_PREFIX}LOG_LEVEL, default: WARNING)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMAT_CHOICES,
        default=_env("LOG_FORMAT", "text"),
        help=f"Log format (env: {ENV_PREFIX}LOG_FORMAT, default: text)",
    )
    return parser


def _parse_headers(parser: argparse.ArgumentParser, values: Sequence[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            parser.error(f"invalid header {value!r}, expected NAME:VALUE")
        headers[name.strip()] = header_value.strip()
    return headers


async def fetch_schema(config: GraphQlClientConfig) -> GraphQlResponse[Any]:
    """Send the introspection query to ``config.endpoint``."""
    async with HttpGraphQlClient(config) as client:
        return await client.execute(introspection_request())


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False))


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    # argparse skips the choices check for defaults taken from the environment
    if args.method not in METHOD_CHOICES:
        parser.error(f"argument --method: invalid choice: {args.method!r}")
    if args.log_format not in LOG_FORMAT_CHOICES:
        parser.error(f"argument --log-format: invalid choice: {args.log_format!r}")
    config = GraphQlClientConfig(
        endpoint=args.uri,
        method=args.method,
        timeout_seconds=args.timeout,
        headers=_parse_headers(parser, args.header),
    )
    log = new_logger(args.log_level, args.log_format).bind(endpoint=args.uri)

    try:
        response = asyncio.run(fetch_schema(config))
    except GraphQlException as e:
        log.error("introspection.failed", code=e.code, errors=[err.message for err in e.errors])
        if e.json_response is not None:
            _print_json(e.json_response)
        return EXIT_FAILURE
    except GraphQlClientError as e:
        log.error("introspection.failed", code=e.code, error=str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        log.warning("introspection.interrupted")
        return EXIT_INTERRUPTED

    _print_json(response.to_dict())
    return EXIT_OK


def run() -> None:
    sys.exit(main())
