"""
Zano address codec and stealth address key derivation
"""

from .address import (
    AddressKeys,
    IntegratedAddressKeys,
    decode_address,
    decode_integrated_address,
    derive_stealth_address_hex,
    encode_address,
    encode_integrated_address,
    generate_payment_id,
    is_valid_address,
)
from .derivation import (
    compute_concealing_point,
    compute_key_derivation,
    derivation_to_scalar,
    derive_output_public_key,
    get_derivation_to_scalar,
)
from .exceptions import (
    ChecksumMismatch,
    CryptoOperationFailed,
    InvalidArgument,
    InvalidFormat,
    InvalidLength,
    ZanoAddressError,
)

__version__ = "0.1.0"

__all__ = [
    "AddressKeys",
    "IntegratedAddressKeys",
    "decode_address",
    "decode_integrated_address",
    "derive_stealth_address_hex",
    "encode_address",
    "encode_integrated_address",
    "generate_payment_id",
    "is_valid_address",
    "compute_concealing_point",
    "compute_key_derivation",
    "derivation_to_scalar",
    "derive_output_public_key",
    "get_derivation_to_scalar",
    "ChecksumMismatch",
    "CryptoOperationFailed",
    "InvalidArgument",
    "InvalidFormat",
    "InvalidLength",
    "ZanoAddressError",
]
