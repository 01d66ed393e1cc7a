"""Typed, read-only provider for node JSON-RPC queries.

Example:
    ```python
    from evmrpc.block_param import BlockTag
    from evmrpc.provider import Provider

    async with Provider.from_url("https://rpc.sepolia.org") as provider:
        latest = await provider.current_block_number()
        pending = await provider.block_by_number(BlockTag.PENDING)
        if pending is None:
            print("no pending block yet")
    ```
"""

from collections.abc import Sequence

from typing import TYPE_CHECKING, Literal, Self, overload

from evmrpc.block_param import (
    BlockTag,
    DefaultBlockParam,
    as_block_param,
    encode_block_param,
)
from evmrpc.decoder import (
    decode_block,
    decode_hex_data,
    decode_optional_quantity,
    decode_quantity,
    decode_receipt,
    decode_transaction,
)
from evmrpc.errors import InvalidParameter
from evmrpc.helpers.config import get_eth_rpc_url, get_rpc_max_retries, get_rpc_timeout
from evmrpc.helpers.constants import (
    ADDRESS_PATTERN,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    ETH_BLOCK_NUMBER,
    ETH_CALL,
    ETH_GAS_PRICE,
    ETH_GET_BALANCE,
    ETH_GET_BLOCK_BY_HASH,
    ETH_GET_BLOCK_BY_NUMBER,
    ETH_GET_BLOCK_TRANSACTION_COUNT_BY_HASH,
    ETH_GET_CODE,
    ETH_GET_STORAGE_AT,
    ETH_GET_TRANSACTION_BY_BLOCK_HASH_AND_INDEX,
    ETH_GET_TRANSACTION_BY_BLOCK_NUMBER_AND_INDEX,
    ETH_GET_TRANSACTION_BY_HASH,
    ETH_GET_TRANSACTION_COUNT,
    ETH_GET_TRANSACTION_RECEIPT,
    HASH_PATTERN,
    SLOT_PATTERN,
)
from evmrpc.helpers.http import HttpTransport
from evmrpc.models import Block, BlockWithTx, CallRequest, Transaction, TransactionReceipt
from evmrpc.numeric import Uint256, WideUint, encode_quantity
from evmrpc.transport import RpcTransport, Transport


if TYPE_CHECKING:
    from types import TracebackType


type BlockArg = DefaultBlockParam | WideUint | int


def _address(value: str) -> str:
    if not isinstance(value, str) or ADDRESS_PATTERN.fullmatch(value) is None:
        msg = f"Invalid address: {value!r}"
        raise InvalidParameter(msg)
    return value


def _hash(value: str, kind: str = "hash") -> str:
    if not isinstance(value, str) or HASH_PATTERN.fullmatch(value) is None:
        msg = f"Invalid {kind}: {value!r}"
        raise InvalidParameter(msg)
    return value


def _quantity(value: WideUint | int, kind: str) -> str:
    try:
        return encode_quantity(value)
    except (TypeError, ValueError) as e:
        msg = f"Invalid {kind}: {value!r}"
        raise InvalidParameter(msg) from e


def _slot(value: str | WideUint | int) -> str:
    if isinstance(value, str):
        if SLOT_PATTERN.fullmatch(value) is None:
            msg = f"Invalid slot: {value!r}"
            raise InvalidParameter(msg)
        return value
    return _quantity(value, "slot")


def _block(value: BlockArg) -> str:
    return encode_block_param(as_block_param(value))


class Provider:
    """Read-only facade over a node's JSON-RPC interface.

    Each method encodes its parameters, performs one exchange through the
    owned ``RpcTransport`` and decodes the result into a typed value. Errors
    from every layer propagate to the caller unchanged.
    """

    def __init__(self, transport: Transport | RpcTransport) -> None:
        """Initialize provider.

        Args:
            transport: Byte transport to wrap, or a ready ``RpcTransport``
        """
        self.rpc = transport if isinstance(transport, RpcTransport) else RpcTransport(transport)

    @classmethod
    def from_url(
        cls,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> Self:
        """Create a provider speaking HTTP(S) to ``rpc_url``."""
        return cls(HttpTransport(rpc_url, timeout, max_retries=max_retries))

    @classmethod
    def from_env(cls) -> Self:
        """Create a provider from ETH_RPC_URL, ETH_RPC_TIMEOUT and ETH_RPC_MAX_RETRIES.

        Raises:
            ValueError: If ETH_RPC_URL is unset or a setting is invalid
        """
        return cls.from_url(
            get_eth_rpc_url(),
            get_rpc_timeout(),
            max_retries=get_rpc_max_retries(),
        )

    async def current_block_number(self) -> Uint256:
        """Get the number of the most recent block."""
        return decode_quantity(await self.rpc.call(ETH_BLOCK_NUMBER))

    async def gas_price(self) -> Uint256:
        """Get the current gas price in wei."""
        return decode_quantity(await self.rpc.call(ETH_GAS_PRICE))

    async def balance(self, address: str, block: BlockArg = BlockTag.LATEST) -> Uint256:
        """Get the balance in wei of ``address`` at ``block``."""
        result = await self.rpc.call(ETH_GET_BALANCE, [_address(address), _block(block)])
        return decode_quantity(result)

    async def balances(
        self, addresses: Sequence[str], block: BlockArg = BlockTag.LATEST
    ) -> dict[str, Uint256]:
        """Get balances for several addresses in one batch request.

        Args:
            addresses: Account addresses
            block: Block at which all balances are read

        Returns:
            Dict mapping each address to its balance in wei
        """
        block_param = _block(block)
        results = await self.rpc.batch_call(
            [(ETH_GET_BALANCE, [_address(a), block_param]) for a in addresses]
        )
        return {
            address: decode_quantity(result)
            for address, result in zip(addresses, results, strict=True)
        }

    async def storage_at(
        self,
        address: str,
        slot: str | WideUint | int,
        block: BlockArg = BlockTag.LATEST,
    ) -> str:
        """Get the raw 32-byte word stored at ``slot`` of ``address``."""
        result = await self.rpc.call(
            ETH_GET_STORAGE_AT, [_address(address), _slot(slot), _block(block)]
        )
        return decode_hex_data(result)

    async def code(self, address: str, block: BlockArg = BlockTag.LATEST) -> str:
        """Get the contract code at ``address``; ``0x`` for plain accounts."""
        result = await self.rpc.call(ETH_GET_CODE, [_address(address), _block(block)])
        return decode_hex_data(result)

    async def transaction_count(
        self, address: str, block: BlockArg = BlockTag.LATEST
    ) -> Uint256:
        """Get the number of transactions sent from ``address``."""
        result = await self.rpc.call(
            ETH_GET_TRANSACTION_COUNT, [_address(address), _block(block)]
        )
        return decode_quantity(result)

    async def block_transaction_count_by_hash(self, block_hash: str) -> Uint256 | None:
        """Get the transaction count of a block, or None if it is unknown."""
        result = await self.rpc.call(
            ETH_GET_BLOCK_TRANSACTION_COUNT_BY_HASH, [_hash(block_hash, "block hash")]
        )
        return decode_optional_quantity(result)

    @overload
    async def block_by_hash(
        self, block_hash: str, full_tx: Literal[False] = False
    ) -> Block | None: ...

    @overload
    async def block_by_hash(
        self, block_hash: str, full_tx: Literal[True]
    ) -> BlockWithTx | None: ...

    async def block_by_hash(
        self, block_hash: str, full_tx: bool = False
    ) -> Block | BlockWithTx | None:
        """Get a block by hash, or None if the node does not know it."""
        result = await self.rpc.call(
            ETH_GET_BLOCK_BY_HASH, [_hash(block_hash, "block hash"), full_tx]
        )
        return decode_block(result, full_tx)

    @overload
    async def block_by_number(
        self, param: BlockArg = BlockTag.LATEST, full_tx: Literal[False] = False
    ) -> Block | None: ...

    @overload
    async def block_by_number(
        self, param: BlockArg, full_tx: Literal[True]
    ) -> BlockWithTx | None: ...

    async def block_by_number(
        self, param: BlockArg = BlockTag.LATEST, full_tx: bool = False
    ) -> Block | BlockWithTx | None:
        """Get a block by number or tag.

        Args:
            param: Block tag or explicit number
            full_tx: Whether to embed full transaction records

        Returns:
            ``BlockWithTx`` if ``full_tx`` else ``Block``; None when the block
            does not exist (e.g. no pending block has been produced yet)
        """
        result = await self.rpc.call(ETH_GET_BLOCK_BY_NUMBER, [_block(param), full_tx])
        return decode_block(result, full_tx)

    async def transaction_by_hash(self, tx_hash: str) -> Transaction | None:
        """Get a transaction by hash, or None if the node does not know it."""
        result = await self.rpc.call(
            ETH_GET_TRANSACTION_BY_HASH, [_hash(tx_hash, "transaction hash")]
        )
        return decode_transaction(result)

    async def transaction_by_block_hash_and_index(
        self, block_hash: str, index: WideUint | int
    ) -> Transaction | None:
        """Get the transaction at ``index`` in the block with ``block_hash``."""
        result = await self.rpc.call(
            ETH_GET_TRANSACTION_BY_BLOCK_HASH_AND_INDEX,
            [_hash(block_hash, "block hash"), _quantity(index, "transaction index")],
        )
        return decode_transaction(result)

    async def transaction_by_block_number_and_index(
        self, param: BlockArg, index: WideUint | int
    ) -> Transaction | None:
        """Get the transaction at ``index`` in the block at ``param``.

        Returns:
            The transaction, or None if the block or index does not exist
        """
        result = await self.rpc.call(
            ETH_GET_TRANSACTION_BY_BLOCK_NUMBER_AND_INDEX,
            [_block(param), _quantity(index, "transaction index")],
        )
        return decode_transaction(result)

    async def transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """Get the receipt of a mined transaction, or None while it is pending."""
        result = await self.rpc.call(
            ETH_GET_TRANSACTION_RECEIPT, [_hash(tx_hash, "transaction hash")]
        )
        return decode_receipt(result)

    async def call(self, request: CallRequest, block: BlockArg = BlockTag.LATEST) -> str:
        """Execute a message call without creating a transaction.

        Returns:
            The call's return data as hex
        """
        result = await self.rpc.call(ETH_CALL, [request.to_wire(), _block(block)])
        return decode_hex_data(result)

    async def aclose(self) -> None:
        await self.rpc.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: "TracebackType | None",
    ) -> None:
        await self.aclose()


__all__ = ["Provider"]
