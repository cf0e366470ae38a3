#!/usr/bin/env python3
"""
Derivation Module - Stealth address key derivation
==================================================

This module computes the shared secret between a transaction and its
recipient and the one-time public key of each transaction output.

Derivation pipeline:
1. derivation = 8 * (a * R)          a: private view key, R: tx public key
2. h = Hs(derivation || varint(i))   i: output index
3. P = h * G + B                     B: recipient spend public key

The multiplication by 8 clears the cofactor so the derivation lies in the
prime-order subgroup. All multiplications are unclamped: the view key is a
raw scalar, not a clamped signing key.
"""

import logging

from .config import EC_POINT_SIZE, EC_SCALAR_SIZE
from .crypto import (
    EIGHT_SCALAR,
    check_point,
    encode_varint,
    hash_to_scalar as _hash_to_scalar,
    hex_to_bytes,
    point_add,
    scalarmult,
    scalarmult_base,
)

logger = logging.getLogger(__name__)


def compute_key_derivation(tx_public_key: bytes, secret: bytes) -> bytes:
    """
    Compute the shared derivation point 8 * (secret * tx_public_key)

    The recipient calls this with the transaction public key R and its
    private view key a; the sender gets the same point from the recipient's
    view public key A and the transaction secret r.

    Args:
    - tx_public_key: 32-byte point
    - secret: 32-byte scalar

    Returns:
    - 32-byte derivation point

    Raises:
    - CryptoOperationFailed: If the library rejects either input
    """
    shared = scalarmult(secret, tx_public_key)
    return scalarmult(EIGHT_SCALAR, shared)


def hash_to_scalar(derivation: bytes, output_index: int) -> bytes:
    """
    Hash a derivation and an output index to a scalar: Hs(derivation, i)

    Args:
    - derivation: 32-byte derivation point
    - output_index: Non-negative output index, serialized as a varint

    Returns:
    - 32-byte reduced scalar
    """
    derivation = check_point(derivation, "derivation")
    return _hash_to_scalar(derivation + encode_varint(output_index))


derivation_to_scalar = hash_to_scalar


def derive_output_public_key(derivation: bytes, output_index: int, spend_public_key: bytes) -> bytes:
    """
    Compute the one-time output key h * G + spend_public_key

    This is the key a scanning wallet compares against the outputs of a
    transaction.

    Args:
    - derivation: 32-byte derivation point
    - output_index: Index of the output in the transaction
    - spend_public_key: Recipient's 32-byte spend public key

    Returns:
    - 32-byte one-time public key

    Raises:
    - CryptoOperationFailed: If the library rejects an input
    """
    h = hash_to_scalar(derivation, output_index)
    return point_add(scalarmult_base(h), spend_public_key)


def compute_concealing_point(hash_scalar: bytes, view_public_key: bytes) -> bytes:
    """Blinding point hash_scalar * view_public_key"""
    return scalarmult(hash_scalar, view_public_key)


def get_derivation_to_scalar(tx_pub_key: str, sec_view_key: str, output_index: int) -> bytes:
    """
    Hs(8 * a * R, i) from hex-encoded keys

    Args:
    - tx_pub_key: Transaction public key R, 64 hex chars
    - sec_view_key: Private view key a, 64 hex chars
    - output_index: Output index i

    Returns:
    - 32-byte scalar
    """
    tx_pub_key_buf = hex_to_bytes(tx_pub_key, EC_POINT_SIZE, "txPubKey")
    sec_view_key_buf = hex_to_bytes(sec_view_key, EC_SCALAR_SIZE, "secViewKey")

    derivation = compute_key_derivation(tx_pub_key_buf, sec_view_key_buf)
    scalar = hash_to_scalar(derivation, output_index)
    logger.debug(f"Derived scalar for output {output_index}")
    return scalar
