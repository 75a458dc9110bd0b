"""Shared type definitions for launchpad models.

These types are used across the domain and API models.
"""

import hashlib
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from launchpad.safe_int import U64_MAX


def validate_u64(value: Any) -> str:
    """Validate that a value is a valid u64 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid u64 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    if isinstance(value, bool):
        raise ValueError("U64 must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"U64 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"U64 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"U64 cannot be negative: {value}")
    if int_value > U64_MAX:
        raise ValueError(f"U64 overflow: {value} > 2^64-1")

    return str(int_value)


# 64-bit unsigned integer as decimal string (validated)
U64 = Annotated[
    str,
    BeforeValidator(validate_u64),
    Field(description="64-bit unsigned integer as decimal string"),
]

# Opaque account identity authenticated by the host
Identity = Annotated[str, Field(min_length=1, max_length=64)]

# Derived 32-byte address as lowercase hex
Address = Annotated[str, Field(pattern=r"^[a-f0-9]{64}$")]


def derive_address(tag: bytes, *parts: str) -> str:
    """Derive a stable, collision-free address from a namespace tag.

    Each part is length-prefixed so that ("ab", "c") and ("a", "bc")
    never derive the same address.

    Args:
        tag: Fixed namespace tag (e.g. CURVE_SEED)
        parts: Identities combined with the tag

    Returns:
        sha256 digest as lowercase hex
    """
    return hashlib.sha256(derivation_seed(tag, *parts)).hexdigest()


def derivation_seed(tag: bytes, *parts: str) -> bytes:
    """Return the raw seed bytes hashed by derive_address()."""
    seed = bytearray(tag)
    for part in parts:
        encoded = part.encode("utf-8")
        seed += len(encoded).to_bytes(2, "big")
        seed += encoded
    return bytes(seed)

