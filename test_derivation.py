#!/usr/bin/env python3
"""
Tests for the derivation engine
Shared derivation, hash-to-scalar and one-time output keys
"""

import unittest

import nacl.bindings
import nacl.utils
from Crypto.Hash import keccak

import zano_address
from zano_address.crypto import EIGHT_SCALAR, encode_varint, fast_hash, scalarmult
from zano_address.derivation import (
    compute_concealing_point,
    compute_key_derivation,
    derivation_to_scalar,
    derive_output_public_key,
    get_derivation_to_scalar,
    hash_to_scalar,
)
from zano_address.exceptions import CryptoOperationFailed, InvalidArgument

# Ed25519 group order
L = 2**252 + 27742317777372353535851937790883648493


def random_scalar():
    """Uniform scalar mod the group order"""
    return nacl.bindings.crypto_core_ed25519_scalar_reduce(nacl.utils.random(64))


def generate_keypair():
    """Random (secret scalar, public point) pair"""
    secret = random_scalar()
    return secret, nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(secret)


class TestKeyDerivation(unittest.TestCase):
    """Test the shared derivation point"""

    def setUp(self):
        self.tx_secret, self.tx_public = generate_keypair()
        self.view_secret, self.view_public = generate_keypair()

    def test_sender_and_recipient_agree(self):
        """Test that 8*a*R equals 8*r*A"""
        recipient_side = compute_key_derivation(self.tx_public, self.view_secret)
        sender_side = compute_key_derivation(self.view_public, self.tx_secret)
        self.assertEqual(recipient_side, sender_side)

    def test_cofactor_is_cleared(self):
        """Test that the derivation is eight times the plain product"""
        plain = scalarmult(self.view_secret, self.tx_public)
        self.assertEqual(
            compute_key_derivation(self.tx_public, self.view_secret),
            scalarmult(EIGHT_SCALAR, plain),
        )

    def test_cofactor_by_repeated_addition(self):
        """Test that secret one gives R added to itself eight times"""
        one = (1).to_bytes(32, "little")
        total = self.tx_public
        for _ in range(7):
            total = nacl.bindings.crypto_core_ed25519_add(total, self.tx_public)
        self.assertEqual(compute_key_derivation(self.tx_public, one), total)

    def test_derivation_is_valid_point(self):
        """Test that the derivation lies in the prime-order subgroup"""
        derivation = compute_key_derivation(self.tx_public, self.view_secret)
        self.assertEqual(len(derivation), 32)
        self.assertTrue(nacl.bindings.crypto_core_ed25519_is_valid_point(derivation))

    def test_rejects_invalid_tx_public_key(self):
        """Test that malformed transaction keys fail closed"""
        for tx_public in (bytes(32), self.tx_public[:31], b""):
            with self.subTest(tx_public=tx_public):
                with self.assertRaises(CryptoOperationFailed):
                    compute_key_derivation(tx_public, self.view_secret)

    def test_rejects_invalid_secret(self):
        """Test that a secret of the wrong length fails closed"""
        with self.assertRaises(CryptoOperationFailed):
            compute_key_derivation(self.tx_public, self.view_secret[:16])


class TestHashToScalar(unittest.TestCase):
    """Test Hs(derivation, index)"""

    def setUp(self):
        tx_secret, tx_public = generate_keypair()
        view_secret, _ = generate_keypair()
        self.derivation = compute_key_derivation(tx_public, view_secret)

    def test_matches_reduced_keccak(self):
        """Test against an independent reduction of the digest"""
        for index in (0, 1, 127, 128, 300):
            with self.subTest(index=index):
                digest = fast_hash(self.derivation + encode_varint(index))
                expected = int.from_bytes(digest, "little") % L
                scalar = hash_to_scalar(self.derivation, index)
                self.assertEqual(int.from_bytes(scalar, "little"), expected)

    def test_hash_input_layout(self):
        """Test that the index is appended as literal varint bytes"""
        for index, suffix in ((0, b"\x00"), (127, b"\x7f"), (128, b"\x80\x01"), (300, b"\xac\x02")):
            with self.subTest(index=index):
                digest = keccak.new(digest_bits=256, data=self.derivation + suffix).digest()
                expected = int.from_bytes(digest, "little") % L
                scalar = hash_to_scalar(self.derivation, index)
                self.assertEqual(int.from_bytes(scalar, "little"), expected)

    def test_index_changes_scalar(self):
        """Test that different output indices give different scalars"""
        scalars = {hash_to_scalar(self.derivation, i) for i in range(16)}
        self.assertEqual(len(scalars), 16)

    def test_alias(self):
        """Test the derivation_to_scalar alias"""
        self.assertIs(derivation_to_scalar, hash_to_scalar)

    def test_package_export(self):
        """Test that the package exposes only the derivation_to_scalar name"""
        self.assertIs(zano_address.derivation_to_scalar, hash_to_scalar)
        self.assertNotIn("hash_to_scalar", zano_address.__all__)
        self.assertFalse(hasattr(zano_address, "hash_to_scalar"))

    def test_rejects_negative_index(self):
        """Test that negative output indices are rejected"""
        with self.assertRaises(InvalidArgument):
            hash_to_scalar(self.derivation, -1)

    def test_rejects_invalid_derivation(self):
        """Test that a malformed derivation fails closed"""
        with self.assertRaises(CryptoOperationFailed):
            hash_to_scalar(self.derivation[:31], 0)

    def test_hex_entry_point(self):
        """Test Hs(8*a*R, i) from hex-encoded keys"""
        tx_secret, tx_public = generate_keypair()
        view_secret, _ = generate_keypair()
        derivation = compute_key_derivation(tx_public, view_secret)
        self.assertEqual(
            get_derivation_to_scalar(tx_public.hex(), view_secret.hex(), 3),
            hash_to_scalar(derivation, 3),
        )
        with self.assertRaises(InvalidArgument):
            get_derivation_to_scalar("deadbeef", view_secret.hex(), 3)


class TestOutputPublicKey(unittest.TestCase):
    """Test one-time output key derivation"""

    def setUp(self):
        self.tx_secret, self.tx_public = generate_keypair()
        self.view_secret, self.view_public = generate_keypair()
        self.spend_secret, self.spend_public = generate_keypair()
        self.derivation = compute_key_derivation(self.tx_public, self.view_secret)

    def test_output_key_is_hG_plus_B(self):
        """Test that P - B equals Hs(derivation, i) * G"""
        output_key = derive_output_public_key(self.derivation, 2, self.spend_public)
        h = hash_to_scalar(self.derivation, 2)
        self.assertEqual(
            nacl.bindings.crypto_core_ed25519_sub(output_key, self.spend_public),
            nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(h),
        )

    def test_recipient_recovers_private_key(self):
        """Test that (h + b) * G equals the one-time key"""
        output_key = derive_output_public_key(self.derivation, 0, self.spend_public)
        h = hash_to_scalar(self.derivation, 0)
        one_time_secret = nacl.bindings.crypto_core_ed25519_scalar_add(h, self.spend_secret)
        self.assertEqual(
            nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(one_time_secret),
            output_key,
        )

    def test_deterministic(self):
        """Test that identical inputs give identical keys"""
        first = derive_output_public_key(self.derivation, 5, self.spend_public)
        second = derive_output_public_key(self.derivation, 5, self.spend_public)
        self.assertEqual(first, second)

    def test_distinct_per_index(self):
        """Test that each output index gets its own key"""
        keys = {derive_output_public_key(self.derivation, i, self.spend_public) for i in range(10)}
        self.assertEqual(len(keys), 10)

    def test_rejects_invalid_spend_key(self):
        """Test that an invalid spend key fails closed"""
        with self.assertRaises(CryptoOperationFailed):
            derive_output_public_key(self.derivation, 0, bytes(32))
        with self.assertRaises(CryptoOperationFailed):
            derive_output_public_key(self.derivation, 0, self.spend_public[:31])


class TestConcealingPoint(unittest.TestCase):
    """Test the blinding point building block"""

    def test_concealing_point(self):
        """Test that h * (v * G) equals (h * v) * G"""
        view_secret, view_public = generate_keypair()
        h = random_scalar()
        expected = nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(
            nacl.bindings.crypto_core_ed25519_scalar_mul(h, view_secret)
        )
        self.assertEqual(compute_concealing_point(h, view_public), expected)

    def test_rejects_invalid_view_key(self):
        """Test that a small-order view key fails closed"""
        h = random_scalar()
        with self.assertRaises(CryptoOperationFailed):
            compute_concealing_point(h, bytes(32))


if __name__ == '__main__':
    unittest.main(verbosity=2)
