"""graphql_http ライブラリの例外型定義"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .types import GraphQlError


class GraphQlClientError(Exception):
    """graphql_http ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class GraphQlClientErrorCodes:
    """GraphQlClientError のエラーコード定数。"""

    INVALID_ARGUMENT: str = "INVALID_ARGUMENT"
    TRANSPORT: str = "TRANSPORT"
    MALFORMED_RESPONSE: str = "MALFORMED_RESPONSE"
    GRAPHQL_ERROR: str = "GRAPHQL_ERROR"
    CANCELLED: str = "CANCELLED"
    CLIENT_CLOSED: str = "CLIENT_CLOSED"
    OPERATION_NOT_FOUND: str = "OPERATION_NOT_FOUND"
    UNKNOWN_OPERATION: str = "UNKNOWN_OPERATION"


class GraphQlException(GraphQlClientError):
    """GraphQL レスポンスの ``errors`` フィールドで返されたエラー。

    メッセージは各エラーメッセージを改行で連結したもの。
    パース済みレスポンス本体は ``json_response`` にそのまま保持する（部分的な ``data`` を含む）。
    """

    def __init__(
        self,
        errors: Iterable[GraphQlError],
        json_response: dict[str, Any] | None = None,
    ) -> None:
        self.errors: tuple[GraphQlError, ...] = tuple(errors)
        self.json_response = json_response
        super().__init__(
            code=GraphQlClientErrorCodes.GRAPHQL_ERROR,
            message="\n".join(error.message for error in self.errors),
        )
