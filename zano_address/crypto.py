#!/usr/bin/env python3
"""
Cryptographic Module - Glue over the Ed25519 and Keccak libraries
=================================================================

This module is the only place that talks to the cryptographic libraries.
Everything above it works with plain 32-byte scalars and points:
- Keccak-256 hashing and address checksums
- Canonical varint serialization
- Hash-to-scalar with wide reduction
- Unclamped scalar multiplication and point addition (libsodium)

Key cryptographic concepts:
- Keccak-256: CryptoNote "fast hash" (original Keccak padding, not NIST SHA3)
- Scalar reduction: 64-byte value reduced modulo the Ed25519 group order L
- Unclamped multiplication: raw scalars are used as-is, no bit clamping

Every library rejection is re-raised as CryptoOperationFailed; no operation
substitutes a default value for a bad input.
"""

from typing import Union

import nacl.bindings
import nacl.exceptions
from Crypto.Hash import keccak

from .config import (
    CHECKSUM_LENGTH,
    EC_POINT_SIZE,
    EC_SCALAR_SIZE,
    EC_WIDE_SCALAR_SIZE,
    HEX_REGEX,
)
from .exceptions import CryptoOperationFailed, InvalidArgument

BytesLike = Union[bytes, bytearray]


def allocate_scalar() -> bytearray:
    """Zero-initialized scalar buffer owned by the caller"""
    return bytearray(EC_SCALAR_SIZE)


def allocate_point() -> bytearray:
    """Zero-initialized point buffer owned by the caller"""
    return bytearray(EC_POINT_SIZE)


ZERO_SCALAR = bytes(allocate_scalar())
EIGHT_SCALAR = bytes([8]) + bytes(EC_SCALAR_SIZE - 1)


def fast_hash(data: BytesLike) -> bytes:
    """
    Keccak-256 digest of data

    Args:
    - data: Arbitrary-length input

    Returns:
    - 32-byte digest
    """
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def get_checksum(data: BytesLike) -> bytes:
    """
    Address checksum over a payload

    The checksum is a truncated Keccak-256 digest. It detects transcription
    errors; it is not a signature.

    Args:
    - data: Address payload (everything before the checksum)

    Returns:
    - First CHECKSUM_LENGTH bytes of the digest
    """
    return fast_hash(data)[:CHECKSUM_LENGTH]


def encode_varint(value: int) -> bytes:
    """
    Serialize an unsigned integer as a canonical varint

    Little-endian base-128 groups, high bit set on every byte except the
    last, no redundant trailing groups.

    Args:
    - value: Non-negative integer

    Returns:
    - Minimal-length varint bytes

    Raises:
    - InvalidArgument: If value is not a non-negative int
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgument(f"Invalid varint value: {value!r}")

    buf = bytearray()
    while True:
        towrite = value & 0x7f
        value >>= 7
        if value:
            buf.append(towrite | 0x80)
        else:
            buf.append(towrite)
            break
    return bytes(buf)


def hex_to_bytes(value: str, length: int, name: str) -> bytes:
    """
    Strictly decode a fixed-length hex string

    Raises:
    - InvalidArgument: If value is not a str of exactly 2*length hex chars
    """
    if not isinstance(value, str) or len(value) != length * 2 or not HEX_REGEX.fullmatch(value):
        raise InvalidArgument(
            f"Invalid {name}: must be a hexadecimal string with a length of {length * 2}"
        )
    return bytes.fromhex(value)


def _check_length(value: BytesLike, size: int, name: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)) or len(value) != size:
        raise CryptoOperationFailed(f"Invalid {name}: expected {size} bytes")
    return bytes(value)


def check_point(point: BytesLike, name: str = "point") -> bytes:
    """
    Validate a caller-supplied point

    The point must be canonical, not of small order and in the prime-order
    subgroup.

    Raises:
    - CryptoOperationFailed: If the library rejects the point
    """
    point = _check_length(point, EC_POINT_SIZE, name)
    try:
        valid = nacl.bindings.crypto_core_ed25519_is_valid_point(point)
    except nacl.exceptions.CryptoError as e:
        raise CryptoOperationFailed(f"Invalid {name}: {e}") from e
    if not valid:
        raise CryptoOperationFailed(f"Invalid {name}: not a valid Ed25519 point")
    return point


def scalar_reduce(wide: BytesLike) -> bytes:
    """Reduce a 64-byte little-endian value modulo the group order"""
    wide = _check_length(wide, EC_WIDE_SCALAR_SIZE, "wide scalar")
    try:
        return nacl.bindings.crypto_core_ed25519_scalar_reduce(wide)
    except nacl.exceptions.CryptoError as e:
        raise CryptoOperationFailed(f"Scalar reduction failed: {e}") from e


def scalarmult_base(scalar: BytesLike) -> bytes:
    """Unclamped base-point multiplication: scalar * G"""
    scalar = _check_length(scalar, EC_SCALAR_SIZE, "scalar")
    try:
        return nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(scalar)
    except nacl.exceptions.CryptoError as e:
        raise CryptoOperationFailed(f"Base point multiplication failed: {e}") from e


def scalarmult(scalar: BytesLike, point: BytesLike) -> bytes:
    """Unclamped scalar multiplication: scalar * point"""
    scalar = _check_length(scalar, EC_SCALAR_SIZE, "scalar")
    point = _check_length(point, EC_POINT_SIZE, "point")
    try:
        return nacl.bindings.crypto_scalarmult_ed25519_noclamp(scalar, point)
    except nacl.exceptions.CryptoError as e:
        raise CryptoOperationFailed(f"Scalar multiplication failed: {e}") from e


def point_add(p: BytesLike, q: BytesLike) -> bytes:
    """Add two Ed25519 points"""
    p = check_point(p, "first point")
    q = check_point(q, "second point")
    try:
        return nacl.bindings.crypto_core_ed25519_add(p, q)
    except nacl.exceptions.CryptoError as e:
        raise CryptoOperationFailed(f"Point addition failed: {e}") from e


def hash_to_scalar(data: BytesLike) -> bytes:
    """
    Hash arbitrary data to a scalar

    The 32-byte Keccak digest is widened with a zero block and the 64-byte
    result is reduced modulo L.

    Args:
    - data: Arbitrary-length input

    Returns:
    - 32-byte reduced scalar
    """
    return scalar_reduce(fast_hash(data) + ZERO_SCALAR)


def hs(str32: BytesLike, h: BytesLike) -> bytes:
    """Hash the concatenation of a 32-byte value and h to a scalar"""
    str32 = _check_length(str32, EC_SCALAR_SIZE, "32-byte prefix")
    return hash_to_scalar(str32 + bytes(h))
