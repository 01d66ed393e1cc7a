"""JSON-RPC framing, correlation and error classification."""

import itertools

from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from evmrpc.errors import CorrelationMismatch, RpcCallError, TransportError
from evmrpc.helpers.logging import get_logger
from evmrpc.rpc_models import JsonRpcRequest, JsonRpcResponse


logger = get_logger(__name__)

_request_batch_adapter = TypeAdapter(list[JsonRpcRequest])
_response_batch_adapter = TypeAdapter(list[JsonRpcResponse])


@runtime_checkable
class Transport(Protocol):
    """Byte-level collaborator that delivers a request and returns the reply.

    Implementations own connection handling, timeouts and any retry policy,
    and must be safe for concurrent use if the client is shared.
    """

    async def send(self, payload: bytes) -> bytes: ...


class RpcTransport:
    """Sends JSON-RPC envelopes through a ``Transport``.

    Each call gets a fresh id from a per-instance counter; the response must
    echo that id or ``CorrelationMismatch`` is raised before the result is
    looked at. No retries are performed here.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    async def _exchange(self, label: str, body: bytes) -> bytes:
        try:
            return await self.transport.send(body)
        except TransportError as e:
            logger.warning("%s transport failure: %s", label, e)
            raise
        except Exception as e:
            logger.warning("%s transport failure: %s", label, e)
            msg = f"{label} transport failure: {e}"
            raise TransportError(msg) from e

    @staticmethod
    def _check(method: str, request_id: int | str, response: JsonRpcResponse) -> Any:
        if response.id is None and response.error is not None:
            # Node could not read the request id at all
            logger.warning("%s rejected: %s", method, response.error.message)
            raise RpcCallError(method, response.error)

        if response.id != request_id:
            logger.error(
                "%s response id %r does not match request id %r",
                method,
                response.id,
                request_id,
            )
            raise CorrelationMismatch(request_id, response.id)

        if response.error is not None:
            logger.warning(
                "%s returned RPC error %d: %s",
                method,
                response.error.code,
                response.error.message,
            )
            raise RpcCallError(method, response.error)

        return response.result

    async def call(self, method: str, params: list[Any] | None = None) -> Any:
        """Make a single JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_blockNumber")
            params: Method parameters in protocol order

        Returns:
            The ``result`` member of the response, possibly None

        Raises:
            TransportError: If the transport fails or the reply is not a
                JSON-RPC response object
            CorrelationMismatch: If the reply answers a different request
            RpcCallError: If the node returned an error object
        """
        request = JsonRpcRequest(method=method, params=params or [], id=self.next_id())
        logger.debug("%s -> id %s", method, request.id)

        raw = await self._exchange(method, request.model_dump_json().encode())

        try:
            response = JsonRpcResponse.model_validate_json(raw)
        except ValidationError as e:
            msg = f"{method} returned a malformed response: {e}"
            raise TransportError(msg) from e

        return self._check(method, request.id, response)

    async def batch_call(self, calls: list[tuple[str, list[Any]]]) -> list[Any]:
        """Make multiple JSON-RPC calls in a single batch request.

        Args:
            calls: List of (method, params) tuples

        Returns:
            Results in the same order as ``calls``

        Raises:
            TransportError: If the transport fails or the reply is not a
                list of JSON-RPC response objects
            CorrelationMismatch: If the reply ids do not match the request
                ids exactly once each
            RpcCallError: For the first call that returned an error object
        """
        if not calls:
            return []

        requests = [
            JsonRpcRequest(method=method, params=params, id=self.next_id())
            for method, params in calls
        ]
        logger.debug(
            "batch of %d -> ids %s..%s", len(requests), requests[0].id, requests[-1].id
        )

        raw = await self._exchange("batch", _request_batch_adapter.dump_json(requests))

        try:
            responses = _response_batch_adapter.validate_json(raw)
        except ValidationError as e:
            msg = f"batch returned a malformed response: {e}"
            raise TransportError(msg) from e

        by_id: dict[int | str | None, JsonRpcResponse] = {}
        for response in responses:
            if response.id in by_id:
                raise CorrelationMismatch(None, response.id)
            by_id[response.id] = response

        rejected = by_id.pop(None, None)
        if rejected is not None and rejected.error is not None:
            logger.warning("batch rejected: %s", rejected.error.message)
            raise RpcCallError("batch", rejected.error)

        expected = [r.id for r in requests]
        if set(by_id) != set(expected):
            received = sorted(by_id, key=str)
            logger.error("batch response ids %r do not match %r", received, expected)
            raise CorrelationMismatch(expected, received)

        return [self._check(r.method, r.id, by_id[r.id]) for r in requests]

    async def aclose(self) -> None:
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()


__all__ = [
    "RpcTransport",
    "Transport",
]
