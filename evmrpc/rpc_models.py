"""Pydantic models for JSON-RPC requests and responses."""

from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, Strict, model_validator

from evmrpc.helpers.constants import JSONRPC_VERSION


# JSON value type - using Any for the recursive case
type JsonValue = str | int | float | bool | dict[str, Any] | list[Any] | None


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request envelope."""

    jsonrpc: str = Field(default=JSONRPC_VERSION, description="JSON-RPC version")
    method: str = Field(..., description="Method name to call")
    params: list[Any] = Field(default_factory=list, description="Method parameters")
    id: int | str = Field(..., description="Request ID")

    model_config = ConfigDict(frozen=True)


class RpcError(BaseModel):
    """Error object returned by the node in place of a result."""

    code: int = Field(..., description="JSON-RPC error code")
    message: str = Field(..., description="Human readable error message")
    data: Any = Field(default=None, description="Optional node-specific payload")

    model_config = ConfigDict(frozen=True)


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response envelope.

    Exactly one of ``result`` and ``error`` must be present on the wire. A
    present ``result`` may be null, which is distinct from an absent one. The
    id is matched by exact JSON type, so ``true`` or ``1.0`` is never read as
    ``1``.
    """

    jsonrpc: str = Field(default=JSONRPC_VERSION, description="JSON-RPC version")
    id: Annotated[int, Strict()] | Annotated[str, Strict()] | None = Field(
        ..., description="ID of the request answered"
    )
    result: Any = Field(default=None, description="Method result")
    error: RpcError | None = Field(default=None, description="Error object")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="after")
    def _result_or_error(self) -> Self:
        has_result = "result" in self.model_fields_set
        if self.error is None and not has_result:
            msg = "response carries neither 'result' nor 'error'"
            raise ValueError(msg)
        if self.error is not None and has_result:
            msg = "response carries both 'result' and 'error'"
            raise ValueError(msg)
        return self


__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonValue",
    "RpcError",
]
