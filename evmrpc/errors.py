"""Exception hierarchy for the JSON-RPC client.

Every failure is raised to the immediate caller as one of these types.
Protocol errors reported by the node (``RpcCallError``) are kept apart from
failures below the client (``TransportError``) and from local validation of
the payload (``InvalidNumericEncoding``, ``MalformedEntity``).
"""

from evmrpc.rpc_models import RpcError


class EvmRpcError(Exception):
    """Base class for all client errors."""


class InvalidNumericEncoding(EvmRpcError, ValueError):
    """Hex quantity text is malformed or does not fit the target width."""


class MalformedEntity(EvmRpcError):
    """A decoded structure is missing required fields or has the wrong shape."""


class InvalidParameter(EvmRpcError, ValueError):
    """A request argument was rejected before anything was sent."""


class CallError(EvmRpcError):
    """A JSON-RPC call did not produce a result."""


class RpcCallError(CallError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, method: str, error: RpcError) -> None:
        self.method = method
        self.error = error
        super().__init__(f"{method} failed with RPC error {error.code}: {error.message}")

    @property
    def code(self) -> int:
        return self.error.code


class TransportError(CallError):
    """The transport collaborator failed to deliver a usable response."""


class CorrelationMismatch(CallError):
    """The response id does not match the id of the request."""

    def __init__(self, expected: object, received: object) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Response id {received!r} does not match request id {expected!r}"
        )


__all__ = [
    "CallError",
    "CorrelationMismatch",
    "EvmRpcError",
    "InvalidNumericEncoding",
    "InvalidParameter",
    "MalformedEntity",
    "RpcCallError",
    "TransportError",
]
