"""
Tests for cryptographic primitives.

These tests verify:
- Digests and PBKDF2 agree with hashlib
- AES-256-IGE chaining and round trips
- Big-integer encoding, padding and the SRP range checks
"""
import hashlib

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from twostep.crypto.primitives import (
    aes_ige_decrypt,
    aes_ige_encrypt,
    bytes_to_int,
    check_is_safe_b,
    check_is_safe_ga_or_b,
    generate_random_bytes,
    int32_to_bytes,
    int_to_bytes,
    is_zero,
    pad_to_length,
    padded_xor,
    pbkdf2_hmac_sha512,
    secure_compare,
    sha1_digest,
    sha256_digest,
    sha512_digest,
)
from tests.utils.srp_reference import RFC5054_N


# =============================================================================
# Randomness Tests
# =============================================================================

class TestRandomBytes:
    """Tests for generate_random_bytes."""

    def test_default_length(self):
        """Produces 32 bytes by default."""
        assert len(generate_random_bytes()) == 32

    def test_custom_length(self):
        """Respects custom length."""
        assert len(generate_random_bytes(256)) == 256

    def test_unique(self):
        """Each call is unique."""
        values = {generate_random_bytes() for _ in range(100)}
        assert len(values) == 100


# =============================================================================
# Digest and KDF Tests
# =============================================================================

class TestDigests:
    """Digests match hashlib."""

    @pytest.mark.parametrize("data", [b"", b"abc", bytes(range(256)) * 3])
    def test_digests_match_hashlib(self, data):
        assert sha1_digest(data) == hashlib.sha1(data).digest()
        assert sha256_digest(data) == hashlib.sha256(data).digest()
        assert sha512_digest(data) == hashlib.sha512(data).digest()


class TestPBKDF2:
    """Tests for PBKDF2-HMAC-SHA512."""

    def test_matches_hashlib(self):
        """Output equals hashlib.pbkdf2_hmac with the same inputs."""
        result = pbkdf2_hmac_sha512(b"password", b"salt", 1000)
        assert result == hashlib.pbkdf2_hmac("sha512", b"password", b"salt", 1000)

    def test_output_is_64_bytes(self):
        assert len(pbkdf2_hmac_sha512(b"pw", b"salt", 1)) == 64

    def test_rejects_non_positive_iterations(self):
        with pytest.raises(ValueError, match="Iterations must be positive"):
            pbkdf2_hmac_sha512(b"pw", b"salt", 0)


# =============================================================================
# AES-IGE Tests
# =============================================================================

class TestAESIGE:
    """Tests for AES-256-IGE."""

    @pytest.fixture
    def key(self):
        return generate_random_bytes(32)

    @pytest.fixture
    def iv(self):
        return generate_random_bytes(32)

    def test_roundtrip(self, key, iv):
        """Encrypted data decrypts to the original."""
        plaintext = generate_random_bytes(16 * 10)
        assert aes_ige_decrypt(aes_ige_encrypt(plaintext, key, iv), key, iv) == plaintext

    def test_first_block_matches_definition(self, key, iv):
        """c0 = E(p0 ^ iv[:16]) ^ iv[16:]."""
        plaintext = generate_random_bytes(16)
        encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
        masked = bytes(a ^ b for a, b in zip(plaintext, iv[:16]))
        expected = bytes(a ^ b for a, b in zip(encryptor.update(masked), iv[16:]))
        assert aes_ige_encrypt(plaintext, key, iv) == expected

    def test_changed_block_garbles_following_blocks(self, key, iv):
        """Flipping ciphertext block 0 changes every decrypted block."""
        plaintext = bytes(16 * 4)
        ciphertext = bytearray(aes_ige_encrypt(plaintext, key, iv))
        ciphertext[0] ^= 1
        decrypted = aes_ige_decrypt(bytes(ciphertext), key, iv)
        for offset in range(0, len(plaintext), 16):
            assert decrypted[offset:offset + 16] != plaintext[offset:offset + 16]

    def test_empty_input(self, key, iv):
        assert aes_ige_encrypt(b"", key, iv) == b""
        assert aes_ige_decrypt(b"", key, iv) == b""

    def test_rejects_unaligned_data(self, key, iv):
        with pytest.raises(ValueError, match="multiple of 16"):
            aes_ige_decrypt(b"\x00" * 17, key, iv)

    def test_rejects_wrong_key_length(self, iv):
        with pytest.raises(ValueError, match="Key must be 32 bytes"):
            aes_ige_encrypt(b"\x00" * 16, b"\x00" * 16, iv)

    def test_rejects_wrong_iv_length(self, key):
        with pytest.raises(ValueError, match="IV must be 32 bytes"):
            aes_ige_encrypt(b"\x00" * 16, key, b"\x00" * 16)


# =============================================================================
# Encoding and Padding Tests
# =============================================================================

class TestIntegerEncoding:
    """Tests for big-endian integer conversion."""

    def test_minimal_encoding(self):
        assert int_to_bytes(1) == b"\x01"
        assert int_to_bytes(256) == b"\x01\x00"
        assert int_to_bytes(0) == b""

    def test_bytes_to_int_ignores_leading_zeros(self):
        assert bytes_to_int(b"\x00\x00\x01\x00") == 256

    def test_int32_is_big_endian_signed(self):
        assert int32_to_bytes(3) == b"\x00\x00\x00\x03"
        assert int32_to_bytes(-1) == b"\xff\xff\xff\xff"

    def test_int32_rejects_overflow(self):
        with pytest.raises(OverflowError):
            int32_to_bytes(2 ** 31)


class TestPadding:
    """Tests for left padding and padded XOR."""

    def test_pads_with_leading_zeros(self):
        assert pad_to_length(b"\x01\x02", 4) == b"\x00\x00\x01\x02"

    def test_never_truncates(self):
        assert pad_to_length(b"\x01\x02\x03", 2) == b"\x01\x02\x03"

    def test_padded_xor_aligns_right(self):
        assert padded_xor(b"\x01", b"\xff\x00") == b"\xff\x01"

    def test_padded_xor_is_symmetric(self):
        a, b = generate_random_bytes(5), generate_random_bytes(9)
        assert padded_xor(a, b) == padded_xor(b, a)
        assert len(padded_xor(a, b)) == 9

    def test_is_zero(self):
        assert is_zero(bytes(32))
        assert is_zero(b"")
        assert not is_zero(b"\x00\x01")


# =============================================================================
# SRP Range Check Tests
# =============================================================================

class TestSafetyChecks:
    """Tests for the B and g^a/g^b range checks."""

    p = RFC5054_N
    p_int = int.from_bytes(RFC5054_N, "big")

    @pytest.mark.parametrize("value", [0, 1])
    def test_b_rejects_small_values(self, value):
        assert not check_is_safe_b(int_to_bytes(value), self.p)

    @pytest.mark.parametrize("offset", [-1, 0, 1])
    def test_b_rejects_values_near_p(self, offset):
        assert not check_is_safe_b(int_to_bytes(self.p_int + offset), self.p)

    def test_b_accepts_interior_values(self):
        assert check_is_safe_b(int_to_bytes(2), self.p)
        assert check_is_safe_b(int_to_bytes(self.p_int - 2), self.p)
        assert check_is_safe_b(int_to_bytes(self.p_int // 2), self.p)

    def test_ga_or_b_rejects_values_below_margin(self):
        assert not check_is_safe_ga_or_b(int_to_bytes(2), self.p)
        assert not check_is_safe_ga_or_b(int_to_bytes(1 << (2048 - 65)), self.p)

    def test_ga_or_b_rejects_values_above_margin(self):
        assert not check_is_safe_ga_or_b(int_to_bytes(self.p_int - 2), self.p)

    def test_ga_or_b_accepts_boundaries(self):
        margin = 1 << (2048 - 64)
        assert check_is_safe_ga_or_b(int_to_bytes(margin), self.p)
        assert check_is_safe_ga_or_b(int_to_bytes(self.p_int - margin), self.p)

    def test_ga_or_b_rejects_tiny_modulus(self):
        assert not check_is_safe_ga_or_b(b"\x05", b"\x17")


class TestSecureCompare:
    def test_equal(self):
        assert secure_compare(b"abc", b"abc")

    def test_not_equal(self):
        assert not secure_compare(b"abc", b"abd")
        assert not secure_compare(b"abc", b"ab")
