#!/usr/bin/env python3
"""
Exception Module - Address and key derivation errors
====================================================

This module defines the errors raised by the address codec and the
derivation engine. Every failure is surfaced to the caller with its own
type so wallet code can tell a typo from a corrupted address or from key
material the curve library refuses.

Exception hierarchy:
- ZanoAddressError: Base exception for every error raised by this package
- InvalidArgument: Bad tag/flag, malformed hex, wrong key length
- InvalidFormat: Address text does not match the expected pattern
- InvalidLength: Decoded address has the wrong number of bytes
- ChecksumMismatch: Address checksum does not match its payload
- CryptoOperationFailed: The curve library rejected an input
"""


class ZanoAddressError(Exception):
    """
    Base exception for address and derivation operations

    Catch this to handle every failure of the package in one place.
    """
    pass


class InvalidArgument(ZanoAddressError, ValueError):
    """
    Raised when a caller-supplied argument is malformed

    Examples:
    - Tag or flag outside 0..255
    - Public key that is not exactly 64 hex characters
    - Negative output index
    """
    pass


class InvalidFormat(ZanoAddressError, ValueError):
    """
    Raised when address text has the wrong shape

    Checked before any decoding is attempted, so a string with the wrong
    prefix, length or alphabet never reaches the Base58 codec.
    """
    pass


class InvalidLength(ZanoAddressError, ValueError):
    """Raised when a decoded address does not have the expected byte length"""
    pass


class ChecksumMismatch(ZanoAddressError, ValueError):
    """
    Raised when the address checksum does not match its payload

    A strong signal of a transcription error or tampering.
    """
    pass


class CryptoOperationFailed(ZanoAddressError):
    """
    Raised when the underlying Ed25519 library rejects an input

    Examples:
    - Point that is not canonical or not on the curve
    - Point of small order
    - Scalar or point buffer of the wrong length
    """
    pass
