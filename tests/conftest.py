"""Pytest configuration and shared fixtures for client tests."""

import json

import pytest

from typing import Any
from collections.abc import Callable

from evmrpc.provider import Provider


type Reply = Callable[[Any], Any]

ADDRESS = "0x95ab1853c803c740e7b095776b217f0e8cbd2e16"
BLOCK_HASH = "0x" + "ab" * 32
TX_HASH_1 = "0x" + "11" * 32
TX_HASH_2 = "0x" + "22" * 32


class ScriptedTransport:
    """Transport collaborator that answers with queued replies.

    Each reply is a callable receiving the decoded request and returning the
    JSON body to send back, so replies can echo the request id.
    """

    def __init__(self) -> None:
        self.requests: list[Any] = []
        self._replies: list[Reply] = []

    def reply(self, build: Reply) -> None:
        self._replies.append(build)

    def reply_result(self, result: Any) -> None:
        self.reply(lambda req: {"jsonrpc": "2.0", "id": req["id"], "result": result})

    def reply_error(self, code: int, message: str, data: Any = None) -> None:
        error: dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            error["data"] = data
        self.reply(lambda req: {"jsonrpc": "2.0", "id": req["id"], "error": error})

    def reply_batch(self, results: list[Any]) -> None:
        self.reply(
            lambda reqs: [
                {"jsonrpc": "2.0", "id": req["id"], "result": result}
                for req, result in zip(reqs, results, strict=True)
            ]
        )

    async def send(self, payload: bytes) -> bytes:
        request = json.loads(payload)
        self.requests.append(request)
        build = self._replies.pop(0)
        return json.dumps(build(request)).encode()

    @property
    def last_request(self) -> Any:
        return self.requests[-1]


def make_transaction(tx_hash: str, index: int) -> dict[str, Any]:
    """Build a raw full transaction object as a node returns it."""
    return {
        "blockHash": BLOCK_HASH,
        "blockNumber": "0x1b4",
        "from": "0xa7d9ddbe1f17865597fbd27ec712455208b6b76d",
        "gas": "0xc350",
        "gasPrice": "0x4a817c800",
        "hash": tx_hash,
        "input": "0x68656c6c6f21",
        "nonce": "0x15",
        "to": "0xf02c1c8e6114b1dbe8937a39260b5b0a374432bb",
        "transactionIndex": hex(index),
        # Wider than 64 bits on purpose
        "value": "0x1bc16d674ec800000",
        "v": "0x25",
        "r": "0x1b5e176d927f8e9ab405058b2d2457392da3e20f328b16ddabcebc33eaac5fea",
        "s": "0x4ba69724e8f69de52f0125ad8b3c5c2cef33019bac3249e2c0a2192766d1721c",
        "type": "0x0",
    }


def make_block(*, full_tx: bool) -> dict[str, Any]:
    """Build a raw block object, with hashes or full transactions."""
    tx_hashes = [TX_HASH_1, TX_HASH_2]
    transactions: list[Any] = (
        [make_transaction(h, i) for i, h in enumerate(tx_hashes)]
        if full_tx
        else tx_hashes
    )
    return {
        "number": "0x1b4",
        "hash": BLOCK_HASH,
        "parentHash": "0x" + "cd" * 32,
        "nonce": "0x0000000000000000",
        "sha3Uncles": "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347",
        "logsBloom": "0x" + "00" * 256,
        "transactionsRoot": "0x" + "01" * 32,
        "stateRoot": "0x" + "02" * 32,
        "receiptsRoot": "0x" + "03" * 32,
        "miner": "0x4e65fda2159562a496f9f3522f89122a3088497a",
        "difficulty": "0x0",
        "totalDifficulty": "0xc70d815d562d3cfa955",
        "extraData": "0x",
        "size": "0x220",
        "gasLimit": "0x1c9c380",
        "gasUsed": "0xa410",
        "timestamp": "0x6553f100",
        "baseFeePerGas": "0x7",
        "mixHash": "0x" + "04" * 32,
        "withdrawals": [],
        "uncles": [],
        "transactions": transactions,
    }


@pytest.fixture
def transport() -> ScriptedTransport:
    """Provide a scripted transport collaborator."""
    return ScriptedTransport()


@pytest.fixture
def provider(transport: ScriptedTransport) -> Provider:
    """Provide a provider wired to the scripted transport."""
    return Provider(transport)
