"""Decoding of raw JSON-RPC results into typed entities.

The shape of a block's ``transactions`` array depends on the flag sent with
the request, so ``decode_block`` takes that flag from the caller instead of
guessing from the payload. A null result means the entity does not exist and
decodes to ``None``; anything structurally wrong raises ``MalformedEntity``.
"""

import re
from typing import Any, Literal, overload

from pydantic import BaseModel, ValidationError

from evmrpc.errors import InvalidNumericEncoding, MalformedEntity
from evmrpc.models import Block, BlockWithTx, Transaction, TransactionReceipt
from evmrpc.numeric import Uint256, WideUint


HEX_DATA = re.compile(r"0x(?:[0-9a-fA-F]{2})*")


def _decode_entity[M: BaseModel](model: type[M], raw: Any) -> M | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        msg = f"{model.__name__} must be a JSON object, got {type(raw).__name__}"
        raise MalformedEntity(msg)

    try:
        return model.model_validate(raw)
    except ValidationError as e:
        msg = f"Malformed {model.__name__}: {e}"
        raise MalformedEntity(msg) from e


@overload
def decode_block(raw: Any, want_full_tx: Literal[False]) -> Block | None: ...


@overload
def decode_block(raw: Any, want_full_tx: Literal[True]) -> BlockWithTx | None: ...


@overload
def decode_block(raw: Any, want_full_tx: bool) -> Block | BlockWithTx | None: ...


def decode_block(raw: Any, want_full_tx: bool) -> Block | BlockWithTx | None:
    """Decode an ``eth_getBlockBy*`` result.

    Args:
        raw: The ``result`` member of the response
        want_full_tx: The transaction detail flag sent with the request

    Returns:
        ``BlockWithTx`` when full transactions were requested, ``Block``
        otherwise, or None when the node reported no such block

    Raises:
        MalformedEntity: If a required field is missing, has the wrong shape
            or holds an invalid quantity
    """
    if want_full_tx:
        return _decode_entity(BlockWithTx, raw)
    return _decode_entity(Block, raw)


def decode_transaction(raw: Any) -> Transaction | None:
    """Decode an ``eth_getTransactionBy*`` result."""
    return _decode_entity(Transaction, raw)


def decode_receipt(raw: Any) -> TransactionReceipt | None:
    """Decode an ``eth_getTransactionReceipt`` result."""
    return _decode_entity(TransactionReceipt, raw)


def decode_quantity[W: WideUint](raw: Any, width: type[W] = Uint256) -> W:
    """Decode a hex quantity result.

    Raises:
        InvalidNumericEncoding: If the result is not a string or not a valid
            quantity of the requested width
    """
    if not isinstance(raw, str):
        msg = f"Expected a hex quantity string, got {type(raw).__name__}"
        raise InvalidNumericEncoding(msg)
    return width.from_hex(raw)


def decode_optional_quantity(raw: Any) -> Uint256 | None:
    """Decode a hex quantity result that may be null."""
    if raw is None:
        return None
    return decode_quantity(raw)


def decode_hex_data(raw: Any) -> str:
    """Validate an unformatted byte data result such as contract code.

    Raises:
        MalformedEntity: If the result is not ``0x`` followed by whole bytes
    """
    if not isinstance(raw, str) or HEX_DATA.fullmatch(raw) is None:
        msg = f"Invalid hex data: {raw!r}"
        raise MalformedEntity(msg)
    return raw


__all__ = [
    "decode_block",
    "decode_hex_data",
    "decode_optional_quantity",
    "decode_quantity",
    "decode_receipt",
    "decode_transaction",
]
