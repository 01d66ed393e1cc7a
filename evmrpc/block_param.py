"""Default block parameter: a symbolic chain position or an explicit number."""

from dataclasses import dataclass
from enum import StrEnum

from evmrpc.errors import InvalidParameter
from evmrpc.numeric import Uint256, WideUint


class BlockTag(StrEnum):
    """Symbolic positions in chain history."""

    EARLIEST = "earliest"
    LATEST = "latest"
    PENDING = "pending"


@dataclass(frozen=True, slots=True)
class BlockNumber:
    """Explicit block height.

    Raises:
        TypeError: If ``value`` is not an int or a ``WideUint``
        InvalidNumericEncoding: If ``value`` is negative or wider than 256 bits
    """

    value: Uint256

    def __init__(self, value: Uint256 | WideUint | int) -> None:
        if isinstance(value, Uint256):
            number = value
        elif isinstance(value, WideUint):
            number = Uint256(int(value))
        else:
            number = Uint256(value)
        object.__setattr__(self, "value", number)


type DefaultBlockParam = BlockTag | BlockNumber


def encode_block_param(param: DefaultBlockParam) -> str:
    """Encode a default block parameter into its wire form.

    Example:
        >>> encode_block_param(BlockTag.PENDING)
        'pending'
        >>> encode_block_param(BlockNumber(255))
        '0xff'
    """
    match param:
        case BlockTag():
            return param.value
        case BlockNumber(value=number):
            return number.to_hex()
        case _:
            msg = f"Unsupported block parameter: {param!r}"
            raise InvalidParameter(msg)


def as_block_param(value: DefaultBlockParam | WideUint | int) -> DefaultBlockParam:
    """Coerce caller input into a ``DefaultBlockParam``.

    Raw strings are rejected so wire literals are never built by hand.

    Raises:
        InvalidParameter: If the value is not a tag, a block number or an
            unsigned 256-bit integer
    """
    if isinstance(value, BlockTag | BlockNumber):
        return value
    if isinstance(value, WideUint) or (
        isinstance(value, int) and not isinstance(value, bool)
    ):
        try:
            return BlockNumber(value)
        except ValueError as e:
            msg = f"Invalid block number: {value!r}"
            raise InvalidParameter(msg) from e
    msg = f"Invalid block parameter: {value!r}"
    raise InvalidParameter(msg)


__all__ = [
    "BlockNumber",
    "BlockTag",
    "DefaultBlockParam",
    "as_block_param",
    "encode_block_param",
]
