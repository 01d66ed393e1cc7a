"""Fixed-width unsigned integers exchanged on the wire as hex quantities.

Chain quantities (balances, gas, block numbers, timestamps) travel as
``0x``-prefixed hex strings and may legitimately exceed 64 bits. ``Uint256``
and ``Uint128`` hold such values exactly and never truncate or wrap: a value
that does not fit is rejected with ``InvalidNumericEncoding``.

Example:
    >>> decode_uint256("0x1b4")
    Uint256(436)
    >>> encode_quantity(Uint256(255))
    '0xff'
"""

import re
from functools import total_ordering

from typing import Any, ClassVar, Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from evmrpc.errors import InvalidNumericEncoding


HEX_QUANTITY = re.compile(r"(?:0[xX])?([0-9a-fA-F]+)")


@total_ordering
class WideUint:
    """Immutable unsigned integer bounded to ``BITS`` bits.

    Equality, ordering and hashing are numeric, so values of different widths
    and plain ints compare by magnitude.
    """

    BITS: ClassVar[int]
    __slots__ = ("_value",)

    _value: int

    def __init__(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"{type(self).__name__} requires an int, got {type(value).__name__}"
            raise TypeError(msg)
        if value < 0 or value.bit_length() > self.BITS:
            msg = f"{value} does not fit in {self.BITS} unsigned bits"
            raise InvalidNumericEncoding(msg)
        object.__setattr__(self, "_value", value)

    @classmethod
    def from_hex(cls, text: str) -> Self:
        """Decode a hex quantity, with or without the ``0x`` prefix.

        Raises:
            InvalidNumericEncoding: If the text is empty, not hexadecimal,
                or its magnitude exceeds ``BITS`` bits
        """
        if not isinstance(text, str):
            msg = f"Hex quantity must be a string, got {type(text).__name__}"
            raise InvalidNumericEncoding(msg)

        match = HEX_QUANTITY.fullmatch(text)
        if match is None:
            msg = f"Invalid hex quantity: {text!r}"
            raise InvalidNumericEncoding(msg)

        digits = match.group(1).lstrip("0")
        if len(digits) * 4 > cls.BITS + 3:
            msg = f"Hex quantity {text!r} exceeds {cls.BITS} bits"
            raise InvalidNumericEncoding(msg)

        value = int(digits or "0", 16)
        if value.bit_length() > cls.BITS:
            msg = f"Hex quantity {text!r} exceeds {cls.BITS} bits"
            raise InvalidNumericEncoding(msg)
        return cls(value)

    @classmethod
    def max_value(cls) -> int:
        return (1 << cls.BITS) - 1

    def to_hex(self) -> str:
        """Encode as a lowercase ``0x`` quantity without leading zeros."""
        return f"0x{self._value:x}"

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WideUint):
            return self._value == other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, WideUint):
            return self._value < other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __reduce__(self) -> tuple[type[Self], tuple[int]]:
        return type(self), (self._value,)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    @classmethod
    def _validate(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        if isinstance(value, WideUint):
            return cls(int(value))
        if isinstance(value, str):
            return cls.from_hex(value)
        msg = f"expected a hex quantity string, got {type(value).__name__}"
        raise ValueError(msg)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                encode_quantity
            ),
        )


class Uint256(WideUint):
    """256-bit unsigned integer."""

    BITS = 256
    __slots__ = ()


class Uint128(WideUint):
    """128-bit unsigned integer."""

    BITS = 128
    __slots__ = ()


def decode_uint256(text: str) -> Uint256:
    """Decode hex text into a ``Uint256``.

    Example:
        >>> decode_uint256("ff")
        Uint256(255)
    """
    return Uint256.from_hex(text)


def decode_uint128(text: str) -> Uint128:
    """Decode hex text into a ``Uint128``."""
    return Uint128.from_hex(text)


def encode_quantity(value: WideUint | int) -> str:
    """Encode a value as a wire hex quantity.

    Plain ints are range checked as 256-bit values.

    Example:
        >>> encode_quantity(0)
        '0x0'
    """
    if isinstance(value, WideUint):
        return value.to_hex()
    return Uint256(value).to_hex()


__all__ = [
    "Uint128",
    "Uint256",
    "WideUint",
    "decode_uint128",
    "decode_uint256",
    "encode_quantity",
]
