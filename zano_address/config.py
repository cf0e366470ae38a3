#!/usr/bin/env python3
"""
Configuration Module - Address layout constants and network prefixes
===================================================================

This module contains the constants that fix the binary and textual layout
of Zano addresses. They are consensus-relevant: changing any of them
produces addresses the network will not accept.

Constants defined here:
- Field sizes of the address payload
- Network tag/flag prefixes for plain and integrated addresses
- Textual patterns checked before any Base58 decoding
- Curve element sizes used by the derivation engine
"""

import re

# Address Payload Layout
# ======================
TAG_LENGTH = 1                   # Address tag (first varint byte of the prefix)
FLAG_LENGTH = 1                  # Address flag (second varint byte of the prefix)
SPEND_KEY_LENGTH = 32            # Spend public key
VIEW_KEY_LENGTH = 32             # View public key
CHECKSUM_LENGTH = 4              # Truncated Keccak-256 of the payload
PAYMENT_ID_LENGTH = 8            # Payment identifier in integrated addresses

BUFFER_ADDRESS_LENGTH = (
    TAG_LENGTH + FLAG_LENGTH + SPEND_KEY_LENGTH + VIEW_KEY_LENGTH + CHECKSUM_LENGTH
)
BUFFER_INTEGRATED_ADDRESS_LENGTH = BUFFER_ADDRESS_LENGTH + PAYMENT_ID_LENGTH

SPEND_KEY_OFFSET = TAG_LENGTH + FLAG_LENGTH
VIEW_KEY_OFFSET = SPEND_KEY_OFFSET + SPEND_KEY_LENGTH
PAYMENT_ID_OFFSET = VIEW_KEY_OFFSET + VIEW_KEY_LENGTH

# Network Prefixes
# ================
# The prefixes are the two bytes of the varint-encoded Base58 prefix:
# 197 -> c5 01 ("Zx..."), 0x3678 -> f8 6c ("iZ...").
ADDRESS_TAG_PREFIX = 0xc5
ADDRESS_FLAG_PREFIX = 0x01
INTEGRATED_ADDRESS_TAG_PREFIX = 0xf8
INTEGRATED_ADDRESS_FLAG_PREFIX = 0x6c

# Textual Formats
# ===============
ADDRESS_REGEX = re.compile(r"^Z[a-zA-Z0-9]{96}$")
INTEGRATED_ADDRESS_REGEX = re.compile(r"^iZ[a-zA-Z0-9]{106}$")
HEX_REGEX = re.compile(r"^(?:[0-9a-fA-F]{2})+$")
PAYMENT_ID_REGEX = re.compile(r"^[0-9a-fA-F]{16}$")

# Curve Element Sizes
# ===================
EC_POINT_SIZE = 32               # Compressed Ed25519 point
EC_SCALAR_SIZE = 32              # Reduced Ed25519 scalar
EC_WIDE_SCALAR_SIZE = 64         # Input width of scalar reduction
