"""GraphQL types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .exceptions import GraphQlClientError, GraphQlClientErrorCodes

T = TypeVar("T")

OPERATION_NAME_FIELD = "operationName"
QUERY_FIELD = "query"
VARIABLES_FIELD = "variables"
DATA_FIELD = "data"
ERRORS_FIELD = "errors"


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


@dataclass
class GraphQlRequest:
    """GraphQL query or mutation.

    Blank ``operation_name`` and ``query`` values are stored as ``None``, both
    on construction and on later assignment, so they never reach the wire.
    """

    query: str | None = None
    variables: dict[str, Any] | None = None
    operation_name: str | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("query", "operation_name"):
            value = _blank_to_none(value)
        super().__setattr__(name, value)


@dataclass(frozen=True)
class GraphQlLocation:
    """Location of an error in a GraphQL document (1-based)."""

    line: int
    column: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphQlLocation:
        line = data.get("line")
        column = data.get("column")
        for name, value in (("line", line), ("column", column)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise GraphQlClientError(
                    code=GraphQlClientErrorCodes.MALFORMED_RESPONSE,
                    message=f"Invalid error location {name}: {value!r}",
                )
        return cls(line=line, column=column)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column}


@dataclass
class GraphQlError:
    """GraphQL error.

    ``additional_data`` keeps every field besides ``message`` and
    ``locations`` (``path``, ``extensions``, server specific entries).
    """

    message: str
    locations: tuple[GraphQlLocation, ...] = ()
    additional_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphQlError:
        """Decode one entry of a response ``errors`` field."""
        raw_locations = data.get("locations") or []
        if not isinstance(raw_locations, list) or not all(
            isinstance(loc, dict) for loc in raw_locations
        ):
            raise GraphQlClientError(
                code=GraphQlClientErrorCodes.MALFORMED_RESPONSE,
                message=f"Invalid error locations: {raw_locations!r}",
            )
        message = data.get("message")
        return cls(
            message="" if message is None else str(message),
            locations=tuple(GraphQlLocation.from_dict(loc) for loc in raw_locations),
            additional_data={
                k: v for k, v in data.items() if k not in ("message", "locations")
            },
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"message": self.message}
        if self.locations:
            result["locations"] = [loc.to_dict() for loc in self.locations]
        result.update(self.additional_data)
        return result


@dataclass(frozen=True)
class GraphQlResponse(Generic[T]):
    """GraphQL response.

    ``additional_properties`` holds the top-level fields other than ``data``,
    such as ``extensions``.
    """

    data: T | None = None
    additional_properties: dict[str, Any] = field(default_factory=dict)
    has_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.has_data:
            result[DATA_FIELD] = self.data
        result.update(self.additional_properties)
        return result
