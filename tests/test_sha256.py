"""Tests for the pure-Python SHA-256."""

import hashlib
import random

import pytest
from Crypto.Hash import SHA256

from cryptvault.golden import SHA256_TEST_VECTORS
from cryptvault.sha256 import pad_message, sha256, sha256_hex


class TestKnownAnswers:
    """FIPS 180-4 example messages."""

    def test_empty_message(self) -> None:
        """Test the digest of the empty string."""
        assert sha256_hex(b"") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_abc(self) -> None:
        """Test the one-block 'abc' message."""
        assert sha256_hex(b"abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    @pytest.mark.parametrize("vec", SHA256_TEST_VECTORS)
    def test_all_vectors(self, vec: dict) -> None:
        """Test all bundled vectors."""
        assert sha256_hex(vec["message"]) == vec["digest"]

    def test_million_a(self) -> None:
        """Test the long message of one million 'a' characters."""
        assert sha256_hex(b"a" * 1_000_000) == (
            "cdc76e5c9914fb9281a1c7e284d73e67f1809a48a497200e046d39ccc7112cd0"
        )

    def test_digest_is_32_bytes(self) -> None:
        assert len(sha256(b"anything")) == 32


class TestPadding:
    """Tests for Merkle-Damgard message padding."""

    @pytest.mark.parametrize("length", [0, 1, 55, 56, 63, 64, 65, 119, 120, 128])
    def test_padded_length_is_block_multiple(self, length: int) -> None:
        """Test that padded messages always fill whole 64-byte blocks."""
        padded = pad_message(b"x" * length)
        assert len(padded) % 64 == 0
        assert len(padded) >= length + 9

    def test_boundary_56_needs_second_block(self) -> None:
        """A 56-byte message leaves no room for the length field."""
        assert len(pad_message(bytes(55))) == 64
        assert len(pad_message(bytes(56))) == 128

    def test_marker_and_length_field(self) -> None:
        """Test 0x80 marker placement and big-endian bit length."""
        padded = pad_message(b"abc")
        assert padded[3] == 0x80
        assert padded[4:56] == bytes(52)
        assert int.from_bytes(padded[56:], "big") == 24


class TestAgainstReferences:
    """Cross-check against PyCryptodome and hashlib."""

    @pytest.mark.parametrize("seed", range(5))
    def test_random_lengths_match_pycryptodome(self, seed: int) -> None:
        """Test random messages of assorted lengths."""
        rng = random.Random(seed)
        for length in list(range(0, 140)) + [rng.randrange(140, 2000) for _ in range(10)]:
            data = rng.randbytes(length)
            assert sha256(data) == SHA256.new(data).digest(), f"length {length}"

    def test_matches_hashlib(self) -> None:
        data = bytes(range(256)) * 3
        assert sha256(data) == hashlib.sha256(data).digest()

    def test_accepts_bytearray(self) -> None:
        assert sha256(bytearray(b"abc")) == sha256(b"abc")

    def test_rejects_str(self) -> None:
        """Test that text must be encoded by the caller."""
        with pytest.raises(TypeError):
            sha256("abc")  # type: ignore[arg-type]

    def test_deterministic(self) -> None:
        assert sha256(b"repeat") == sha256(b"repeat")
