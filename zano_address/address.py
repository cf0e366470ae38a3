#!/usr/bin/env python3
"""
Address Module - Zano address encoding and decoding
===================================================

This module converts between raw spend/view public keys and the textual
addresses users exchange:
- Plain addresses: tag | flag | spend key | view key | checksum
- Integrated addresses: the same plus an 8-byte payment ID before the checksum
- Stealth output keys from hex-encoded transaction and wallet keys

Address format (plain, 70 bytes, 97 Base58 characters starting with "Z"):
[tag 1B][flag 1B][spend public key 32B][view public key 32B][checksum 4B]

Address format (integrated, 78 bytes, 108 characters starting with "iZ"):
[tag 1B][flag 1B][spend 32B][view 32B][payment ID 8B][checksum 4B]

The checksum is the first 4 bytes of Keccak-256 over everything before it.
Text uses the CryptoNote block Base58 variant (8-byte blocks, 11 chars each).

Decoding stops at the first failing step and never returns partial keys.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import nacl.utils
from monero import base58

from .config import (
    ADDRESS_REGEX,
    BUFFER_ADDRESS_LENGTH,
    BUFFER_INTEGRATED_ADDRESS_LENGTH,
    CHECKSUM_LENGTH,
    EC_POINT_SIZE,
    EC_SCALAR_SIZE,
    INTEGRATED_ADDRESS_REGEX,
    PAYMENT_ID_LENGTH,
    PAYMENT_ID_OFFSET,
    PAYMENT_ID_REGEX,
    SPEND_KEY_LENGTH,
    SPEND_KEY_OFFSET,
    VIEW_KEY_LENGTH,
    VIEW_KEY_OFFSET,
)
from .crypto import get_checksum, hex_to_bytes
from .derivation import compute_key_derivation, derive_output_public_key
from .exceptions import (
    ChecksumMismatch,
    InvalidArgument,
    InvalidFormat,
    InvalidLength,
    ZanoAddressError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressKeys:
    """Public keys carried by an address, as lowercase hex"""
    spend_public_key: str
    view_public_key: str


@dataclass(frozen=True)
class IntegratedAddressKeys(AddressKeys):
    """Public keys and payment ID carried by an integrated address"""
    payment_id: str


def _check_prefix_byte(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xff:
        raise InvalidArgument(f"Invalid {name}: must be an integer between 0 and 255")
    return value


def _build_payload(tag: int, flag: int, spend_public_key: str, view_public_key: str) -> bytes:
    """tag | flag | spend | view, validated"""
    tag = _check_prefix_byte(tag, "tag")
    flag = _check_prefix_byte(flag, "flag")
    spend_key = hex_to_bytes(spend_public_key, SPEND_KEY_LENGTH, "spendPublicKey")
    view_key = hex_to_bytes(view_public_key, VIEW_KEY_LENGTH, "viewPublicKey")
    return bytes([tag, flag]) + spend_key + view_key


def _encode_with_checksum(payload: bytes) -> str:
    return base58.encode((payload + get_checksum(payload)).hex())


def _decode_with_checksum(address: str, expected_length: int) -> bytes:
    """
    Base58 decode, check length and checksum

    Returns:
    - Payload bytes without the checksum
    """
    try:
        buf = bytes.fromhex(base58.decode(address))
    except (ValueError, TypeError) as e:
        raise InvalidFormat(f"Invalid Base58 encoding: {e}") from e

    if len(buf) != expected_length:
        raise InvalidLength(
            f"Invalid buffer address length: expected {expected_length}, got {len(buf)}"
        )

    payload = buf[:-CHECKSUM_LENGTH]
    checksum = buf[-CHECKSUM_LENGTH:]
    if checksum != get_checksum(payload):
        raise ChecksumMismatch("Invalid address checksum")
    return payload


def _split_keys(payload: bytes):
    spend_public_key = payload[SPEND_KEY_OFFSET:SPEND_KEY_OFFSET + SPEND_KEY_LENGTH].hex()
    view_public_key = payload[VIEW_KEY_OFFSET:VIEW_KEY_OFFSET + VIEW_KEY_LENGTH].hex()

    if len(spend_public_key) != SPEND_KEY_LENGTH * 2 or len(view_public_key) != VIEW_KEY_LENGTH * 2:
        raise InvalidFormat("Invalid key format in the address")
    return spend_public_key, view_public_key


def generate_payment_id() -> bytes:
    """Fresh random payment ID from the secure random source"""
    return nacl.utils.random(PAYMENT_ID_LENGTH)


def encode_address(tag: int, flag: int, spend_public_key: str, view_public_key: str) -> str:
    """
    Encode public keys as a plain address

    Process:
    1. Validate tag, flag and both keys
    2. Assemble tag | flag | spend | view
    3. Append the 4-byte Keccak checksum
    4. Base58 encode

    Args:
    - tag: Address tag, 0..255
    - flag: Address flag, 0..255
    - spend_public_key: 64 hex chars
    - view_public_key: 64 hex chars

    Returns:
    - Base58 address string

    Raises:
    - InvalidArgument: If tag, flag or a key is malformed
    """
    payload = _build_payload(tag, flag, spend_public_key, view_public_key)
    address = _encode_with_checksum(payload)
    logger.debug(f"Encoded address with tag {tag:#04x} flag {flag:#04x}")
    return address


def decode_address(address: str) -> AddressKeys:
    """
    Retrieve the spend and view public keys from a plain address

    Args:
    - address: Base58 address, "Z" followed by 96 characters

    Returns:
    - AddressKeys with both keys as lowercase hex

    Raises:
    - InvalidFormat: If the text does not match the address pattern
    - InvalidLength: If the decoded address is not 70 bytes
    - ChecksumMismatch: If the checksum does not match the payload
    """
    if not isinstance(address, str) or not ADDRESS_REGEX.fullmatch(address):
        raise InvalidFormat("Invalid address format")

    payload = _decode_with_checksum(address, BUFFER_ADDRESS_LENGTH)
    spend_public_key, view_public_key = _split_keys(payload)
    logger.debug(f"Decoded address with tag {payload[0]:#04x} flag {payload[1]:#04x}")
    return AddressKeys(spend_public_key, view_public_key)


def encode_integrated_address(tag: int, flag: int, spend_public_key: str, view_public_key: str,
                              payment_id: Optional[str] = None) -> str:
    """
    Encode public keys and a payment ID as an integrated address

    A fresh random payment ID is generated unless one is given, so two
    calls with the same keys return different addresses. The checksum
    covers the payment ID.

    Args:
    - tag: Address tag, 0..255
    - flag: Address flag, 0..255
    - spend_public_key: 64 hex chars
    - view_public_key: 64 hex chars
    - payment_id: Optional 16 hex chars (8 bytes)

    Returns:
    - Base58 integrated address string

    Raises:
    - InvalidArgument: If tag, flag, a key or the payment ID is malformed
    """
    payload = _build_payload(tag, flag, spend_public_key, view_public_key)

    if payment_id is None:
        payment_id_buf = generate_payment_id()
    else:
        if not isinstance(payment_id, str) or not PAYMENT_ID_REGEX.fullmatch(payment_id):
            raise InvalidArgument(
                f"Invalid paymentId: must be a hexadecimal string with a length of {PAYMENT_ID_LENGTH * 2}"
            )
        payment_id_buf = bytes.fromhex(payment_id)

    address = _encode_with_checksum(payload + payment_id_buf)
    logger.debug(f"Encoded integrated address with tag {tag:#04x} flag {flag:#04x}")
    return address


def decode_integrated_address(integrated_address: str) -> IntegratedAddressKeys:
    """
    Retrieve the keys and payment ID from an integrated address

    Args:
    - integrated_address: Base58 address, "iZ" followed by 106 characters

    Returns:
    - IntegratedAddressKeys with keys and payment ID as lowercase hex

    Raises:
    - InvalidFormat: If the text does not match the integrated pattern
    - InvalidLength: If the decoded address is not 78 bytes
    - ChecksumMismatch: If the checksum does not match the payload
    """
    if not isinstance(integrated_address, str) or not INTEGRATED_ADDRESS_REGEX.fullmatch(integrated_address):
        raise InvalidFormat("Invalid integrated address format")

    payload = _decode_with_checksum(integrated_address, BUFFER_INTEGRATED_ADDRESS_LENGTH)
    spend_public_key, view_public_key = _split_keys(payload)
    payment_id = payload[PAYMENT_ID_OFFSET:PAYMENT_ID_OFFSET + PAYMENT_ID_LENGTH].hex()
    logger.debug(f"Decoded integrated address with tag {payload[0]:#04x} flag {payload[1]:#04x}")
    return IntegratedAddressKeys(spend_public_key, view_public_key, payment_id)


def is_valid_address(address: str) -> bool:
    """
    Check whether a string is a well-formed plain or integrated address

    Returns:
    - True if the address decodes with a valid checksum, False otherwise
    """
    if isinstance(address, str) and address.startswith("i"):
        decoder = decode_integrated_address
    else:
        decoder = decode_address
    try:
        decoder(address)
    except ZanoAddressError:
        return False
    return True


def derive_stealth_address_hex(tx_pub_key: str, sec_view_key: str, pub_spend_key: str,
                               output_index: int) -> str:
    """
    One-time output key h * G + B from hex-encoded keys

    Args:
    - tx_pub_key: Transaction public key R, 64 hex chars
    - sec_view_key: Recipient private view key a, 64 hex chars
    - pub_spend_key: Recipient spend public key B, 64 hex chars
    - output_index: Output index i

    Returns:
    - One-time public key as 64 lowercase hex chars

    Raises:
    - InvalidArgument: If a key is not well-formed hex
    - CryptoOperationFailed: If the curve library rejects a key
    """
    tx_pub_key_buf = hex_to_bytes(tx_pub_key, EC_POINT_SIZE, "txPubKey")
    sec_view_key_buf = hex_to_bytes(sec_view_key, EC_SCALAR_SIZE, "secViewKey")
    pub_spend_key_buf = hex_to_bytes(pub_spend_key, EC_POINT_SIZE, "pubSpendKey")

    derivation = compute_key_derivation(tx_pub_key_buf, sec_view_key_buf)
    output_key = derive_output_public_key(derivation, output_index, pub_spend_key_buf)
    logger.debug(f"Derived stealth address for output {output_index}")
    return output_key.hex()
