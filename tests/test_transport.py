"""Tests for JSON-RPC transport."""

import json
from unittest.mock import AsyncMock

import pytest

from typing import Any

from conftest import ScriptedTransport

from evmrpc.errors import CallError, CorrelationMismatch, RpcCallError, TransportError
from evmrpc.helpers.http import HttpTransport
from evmrpc.transport import RpcTransport, Transport


def fixed_reply(body: Any) -> AsyncMock:
    """Build a transport mock returning the same body for any request."""
    transport = AsyncMock()
    transport.send.return_value = json.dumps(body).encode()
    return transport


class TestCall:
    """Tests for RpcTransport.call."""

    @pytest.mark.asyncio
    async def test_call_returns_result(self, transport: ScriptedTransport) -> None:
        """Test a successful call returns the raw result."""
        transport.reply_result("0x1000")
        rpc = RpcTransport(transport)

        result = await rpc.call("eth_blockNumber")

        assert result == "0x1000"

    @pytest.mark.asyncio
    async def test_call_envelope(self, transport: ScriptedTransport) -> None:
        """Test the request envelope sent on the wire."""
        transport.reply_result({"number": "0x1"})
        rpc = RpcTransport(transport)

        await rpc.call("eth_getBlockByNumber", ["0x1", True])

        assert transport.last_request == {
            "jsonrpc": "2.0",
            "method": "eth_getBlockByNumber",
            "params": ["0x1", True],
            "id": 1,
        }

    @pytest.mark.asyncio
    async def test_ids_increase(self, transport: ScriptedTransport) -> None:
        """Test each call gets a fresh id."""
        for _ in range(3):
            transport.reply_result("0x1")
        rpc = RpcTransport(transport)

        for _ in range(3):
            await rpc.call("eth_blockNumber")

        assert [r["id"] for r in transport.requests] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_null_result(self, transport: ScriptedTransport) -> None:
        """Test a null result is returned as None."""
        transport.reply_result(None)
        rpc = RpcTransport(transport)

        assert await rpc.call("eth_getBlockByNumber", ["pending", False]) is None

    @pytest.mark.asyncio
    async def test_rpc_error(self, transport: ScriptedTransport) -> None:
        """Test an error object becomes RpcCallError with code and message intact."""
        transport.reply_error(-32000, "header not found", data={"detail": "x"})
        rpc = RpcTransport(transport)

        with pytest.raises(RpcCallError, match="header not found") as exc_info:
            await rpc.call("eth_getBalance", ["0x01", "0x1"])

        assert exc_info.value.code == -32000
        assert exc_info.value.method == "eth_getBalance"
        assert exc_info.value.error.data == {"detail": "x"}
        assert isinstance(exc_info.value, CallError)

    @pytest.mark.asyncio
    async def test_correlation_mismatch(self) -> None:
        """Test a response for another id raises CorrelationMismatch."""
        rpc = RpcTransport(fixed_reply({"jsonrpc": "2.0", "id": 99, "result": "0x1"}))

        with pytest.raises(CorrelationMismatch) as exc_info:
            await rpc.call("eth_blockNumber")

        assert exc_info.value.expected == 1
        assert exc_info.value.received == 99

    @pytest.mark.asyncio
    async def test_correlation_checked_before_error(self) -> None:
        """Test an error for another id is still a mismatch."""
        rpc = RpcTransport(
            fixed_reply({"id": 5, "error": {"code": -32000, "message": "boom"}})
        )

        with pytest.raises(CorrelationMismatch):
            await rpc.call("eth_blockNumber")

    @pytest.mark.asyncio
    async def test_string_id_is_mismatch(self) -> None:
        """Test ids must match exactly, including type."""
        rpc = RpcTransport(fixed_reply({"id": "1", "result": "0x1"}))

        with pytest.raises(CorrelationMismatch):
            await rpc.call("eth_blockNumber")

    @pytest.mark.asyncio
    async def test_null_id_error_is_rpc_error(self) -> None:
        """Test an unparseable-request error with null id surfaces as RPC error."""
        rpc = RpcTransport(
            fixed_reply({"id": None, "error": {"code": -32700, "message": "Parse error"}})
        )

        with pytest.raises(RpcCallError) as exc_info:
            await rpc.call("eth_blockNumber")

        assert exc_info.value.code == -32700

    @pytest.mark.asyncio
    async def test_transport_failure_wrapped(self) -> None:
        """Test arbitrary collaborator failures become TransportError."""
        transport = AsyncMock()
        transport.send.side_effect = ConnectionRefusedError("refused")
        rpc = RpcTransport(transport)

        with pytest.raises(TransportError, match="refused") as exc_info:
            await rpc.call("eth_blockNumber")

        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)

    @pytest.mark.asyncio
    async def test_transport_error_passes_through(self) -> None:
        """Test TransportError from the collaborator is not re-wrapped."""
        transport = AsyncMock()
        error = TransportError("HTTP 502 from node")
        transport.send.side_effect = error
        rpc = RpcTransport(transport)

        with pytest.raises(TransportError) as exc_info:
            await rpc.call("eth_blockNumber")

        assert exc_info.value is error

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [b"not json", b"[]", b'"0x1"', b'{"jsonrpc": "2.0", "id": 1}'],
    )
    async def test_malformed_top_level_response(self, body: bytes) -> None:
        """Test undecodable replies are transport failures."""
        transport = AsyncMock()
        transport.send.return_value = body
        rpc = RpcTransport(transport)

        with pytest.raises(TransportError, match="malformed response"):
            await rpc.call("eth_blockNumber")

    @pytest.mark.asyncio
    async def test_result_and_error_is_malformed(self) -> None:
        """Test a reply with both result and error is a transport failure."""
        rpc = RpcTransport(
            fixed_reply(
                {"id": 1, "result": "0x1", "error": {"code": 1, "message": "x"}}
            )
        )

        with pytest.raises(TransportError, match="malformed response"):
            await rpc.call("eth_blockNumber")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response_id", [True, 1.0])
    async def test_id_of_other_type_not_matched(self, response_id: Any) -> None:
        """Test true or 1.0 never answers request id 1."""
        rpc = RpcTransport(fixed_reply({"id": response_id, "result": "0x1"}))

        with pytest.raises(TransportError, match="malformed response"):
            await rpc.call("eth_blockNumber")

    def test_scripted_transport_satisfies_protocol(
        self, transport: ScriptedTransport
    ) -> None:
        """Test the Transport protocol is structural."""
        assert isinstance(transport, Transport)


class TestBatchCall:
    """Tests for RpcTransport.batch_call."""

    @pytest.mark.asyncio
    async def test_batch_results_in_order(self, transport: ScriptedTransport) -> None:
        """Test results are returned in request order."""
        transport.reply_batch(["0x1000", {"number": "0x1"}])
        rpc = RpcTransport(transport)

        results = await rpc.batch_call(
            [("eth_blockNumber", []), ("eth_getBlockByNumber", ["0x1", False])]
        )

        assert results == ["0x1000", {"number": "0x1"}]
        assert [r["id"] for r in transport.last_request] == [1, 2]

    @pytest.mark.asyncio
    async def test_batch_reordered_response(self, transport: ScriptedTransport) -> None:
        """Test responses are matched by id, not position."""
        transport.reply(
            lambda reqs: [
                {"jsonrpc": "2.0", "id": reqs[1]["id"], "result": "second"},
                {"jsonrpc": "2.0", "id": reqs[0]["id"], "result": "first"},
            ]
        )
        rpc = RpcTransport(transport)

        results = await rpc.batch_call([("a", []), ("b", [])])

        assert results == ["first", "second"]

    @pytest.mark.asyncio
    async def test_batch_empty(self) -> None:
        """Test an empty batch sends nothing."""
        transport = AsyncMock()
        rpc = RpcTransport(transport)

        assert await rpc.batch_call([]) == []
        transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_batch_missing_id(self, transport: ScriptedTransport) -> None:
        """Test a missing response is a correlation failure."""
        transport.reply(lambda reqs: [{"id": reqs[0]["id"], "result": "0x1"}])
        rpc = RpcTransport(transport)

        with pytest.raises(CorrelationMismatch):
            await rpc.batch_call([("a", []), ("b", [])])

    @pytest.mark.asyncio
    async def test_batch_duplicate_id(self, transport: ScriptedTransport) -> None:
        """Test a duplicated response id is a correlation failure."""
        transport.reply(
            lambda reqs: [
                {"id": reqs[0]["id"], "result": "0x1"},
                {"id": reqs[0]["id"], "result": "0x2"},
            ]
        )
        rpc = RpcTransport(transport)

        with pytest.raises(CorrelationMismatch):
            await rpc.batch_call([("a", []), ("b", [])])

    @pytest.mark.asyncio
    async def test_batch_entry_error(self, transport: ScriptedTransport) -> None:
        """Test an error entry raises RpcCallError for that method."""
        transport.reply(
            lambda reqs: [
                {"id": reqs[0]["id"], "result": "0x1"},
                {"id": reqs[1]["id"], "error": {"code": -32602, "message": "invalid params"}},
            ]
        )
        rpc = RpcTransport(transport)

        with pytest.raises(RpcCallError) as exc_info:
            await rpc.batch_call([("a", []), ("b", [])])

        assert exc_info.value.method == "b"

    @pytest.mark.asyncio
    async def test_batch_not_a_list(self) -> None:
        """Test a non-list batch reply is a transport failure."""
        rpc = RpcTransport(fixed_reply({"id": 1, "result": "0x1"}))

        with pytest.raises(TransportError):
            await rpc.batch_call([("a", [])])


class TestClose:
    """Tests for closing the underlying transport."""

    @pytest.mark.asyncio
    async def test_aclose_delegates(self) -> None:
        """Test aclose closes collaborators that support it."""
        transport = AsyncMock()
        rpc = RpcTransport(transport)

        await rpc.aclose()

        transport.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_aclose_optional(self, transport: ScriptedTransport) -> None:
        """Test collaborators without aclose are fine."""
        await RpcTransport(transport).aclose()

    @pytest.mark.asyncio
    async def test_http_transport_end_to_end(self, httpx_mock: Any) -> None:
        """Test RpcTransport over HttpTransport with a mocked node."""
        httpx_mock.add_response(
            url="https://node.test",
            method="POST",
            json={"jsonrpc": "2.0", "id": 1, "result": "0x1b4"},
        )

        async with HttpTransport("https://node.test") as http:
            rpc = RpcTransport(http)
            assert await rpc.call("eth_blockNumber") == "0x1b4"

        sent = json.loads(httpx_mock.get_requests()[0].content)
        assert sent["method"] == "eth_blockNumber"
