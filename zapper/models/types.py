"""Shared type definitions for zap models.

Token amounts travel over the API as uint256 decimal strings and are
handled as Python ints everywhere else.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from zapper.safe_int import UINT256_MAX


def validate_uint256(value: Any) -> str:
    """Coerce an amount to its canonical uint256 decimal string.

    Ints and decimal strings are both accepted; the result has no sign or
    leading zeros, so "007" becomes "7".

    Raises:
        ValueError: If the amount is a bool, negative, non-decimal or wider than 256 bits
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(int_value)


# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str) -> str:
    """Normalize an Ethereum address to lowercase with 0x prefix.

    Does not check validity; use is_valid_address() for that.
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x") or len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two token addresses as (token0, token1).

    Pools sort their tokens by address bytes, so comparing the normalized
    hex strings gives the same order.

    Raises:
        ValueError: If both addresses are the same token
    """
    a, b = normalize_address(token_a), normalize_address(token_b)
    if a == b:
        raise ValueError(f"Identical token addresses: {token_a}")
    return (a, b) if a < b else (b, a)
