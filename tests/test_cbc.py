"""
Tests for the CBC codec.

Verifies:
- Round trip for assorted lengths, including empty input
- Fresh IV per call, ciphertext layout
- Failure values for bad lengths, tampering, wrong passwords, IV outage
- Interoperability with PyCryptodome AES-256-CBC
"""

import random

import pytest
from Crypto.Cipher import AES
from Crypto.Util.Padding import pad as lib_pad, unpad as lib_unpad

from cryptvault.cbc import (
    MIN_CIPHERTEXT_SIZE,
    CbcCodec,
    decrypt,
    encrypt,
    valid_ciphertext_length,
)
from cryptvault.cipher import Aes256Cipher
from cryptvault.interfaces import CodecResult, Failure, VaultError
from cryptvault.kdf import derive_key
from cryptvault.padding import pad
from cryptvault.randomness import SeededRandomSource, UnavailableRandomSource
from cryptvault.trace import TraceRecorder

PASSWORD = "correct horse battery staple"


@pytest.fixture
def codec() -> CbcCodec:
    return CbcCodec.from_password(PASSWORD, SeededRandomSource(seed=42))


class TestRoundTrip:
    """decrypt(encrypt(P)) == P."""

    @pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 31, 32, 33, 100, 255, 1024])
    def test_lengths(self, codec: CbcCodec, length: int) -> None:
        plaintext = bytes((i * 31) & 0xFF for i in range(length))
        enc = codec.encrypt(plaintext)
        assert enc.ok
        dec = codec.decrypt(enc.data)
        assert dec.ok
        assert dec.data == plaintext

    @pytest.mark.parametrize("seed", range(5))
    def test_random_passwords(self, seed: int) -> None:
        rng = random.Random(seed)
        password = rng.randbytes(rng.randrange(1, 40))
        plaintext = rng.randbytes(rng.randrange(0, 300))
        enc = encrypt(plaintext, password)
        assert decrypt(enc.data, password).data == plaintext

    def test_module_helpers_use_password_key(self) -> None:
        enc = encrypt(b"hello", "pw", SeededRandomSource(seed=1))
        assert CbcCodec(Aes256Cipher.from_key(derive_key("pw"))).decrypt(enc.data).data == b"hello"


class TestLayout:
    """Ciphertext layout and IV handling."""

    @pytest.mark.parametrize("length", [0, 5, 16, 40])
    def test_size(self, codec: CbcCodec, length: int) -> None:
        """IV + padded length."""
        enc = codec.encrypt(bytes(length))
        assert len(enc.data) == 16 + (length // 16 + 1) * 16

    def test_minimum_size(self, codec: CbcCodec) -> None:
        assert len(codec.encrypt(b"").data) == MIN_CIPHERTEXT_SIZE == 32

    def test_iv_prefix_comes_from_source(self) -> None:
        source = SeededRandomSource(seed=9)
        expected_iv = SeededRandomSource(seed=9).get_bytes(16)
        enc = CbcCodec.from_password(PASSWORD, source).encrypt(b"data")
        assert enc.data[:16] == expected_iv
        assert source.total_bytes == 16

    def test_encryption_is_not_deterministic(self) -> None:
        """Same input twice: different ciphertext, same plaintext."""
        first = encrypt(b"same message", PASSWORD)
        second = encrypt(b"same message", PASSWORD)
        assert first.data != second.data
        assert first.data[:16] != second.data[:16]
        assert decrypt(first.data, PASSWORD).data == b"same message"
        assert decrypt(second.data, PASSWORD).data == b"same message"

    def test_identical_blocks_encrypt_differently(self, codec: CbcCodec) -> None:
        """Chaining hides repeated plaintext blocks."""
        enc = codec.encrypt(b"A" * 64).data
        blocks = [enc[i:i + 16] for i in range(16, len(enc), 16)]
        assert len(set(blocks)) == len(blocks)


class TestFailures:
    """Failures are values, never exceptions."""

    @pytest.mark.parametrize("length", [0, 1, 15, 16, 31, 33, 47])
    def test_invalid_length(self, codec: CbcCodec, length: int) -> None:
        result = codec.decrypt(bytes(length))
        assert not result.ok
        assert result.failure is Failure.INVALID_CIPHERTEXT_LENGTH
        assert result.data == b""

    @pytest.mark.parametrize("length,valid", [
        (31, False), (16, False), (33, False), (32, True), (48, True), (64, True),
    ])
    def test_valid_ciphertext_length(self, length: int, valid: bool) -> None:
        assert valid_ciphertext_length(length) is valid

    def test_random_source_failure(self) -> None:
        codec = CbcCodec.from_password(PASSWORD, UnavailableRandomSource())
        result = codec.encrypt(b"anything")
        assert result.failure is Failure.RANDOM_GENERATION
        assert result.data == b""

    def test_tamper_any_byte(self, codec: CbcCodec) -> None:
        """Flipping any single byte never returns the original plaintext."""
        plaintext = b"The quick brown fox jumps over the lazy dog"
        ciphertext = codec.encrypt(plaintext).data
        for i in range(len(ciphertext)):
            tampered = bytearray(ciphertext)
            tampered[i] ^= 0x01
            result = codec.decrypt(bytes(tampered))
            if result.ok:
                assert result.data != plaintext, f"byte {i}"
            else:
                assert result.failure is Failure.INVALID_PADDING

    def test_wrong_password(self, codec: CbcCodec) -> None:
        ciphertext = codec.encrypt(b"secret payload").data
        result = CbcCodec.from_password("not the password").decrypt(ciphertext)
        assert not result.ok or result.data != b"secret payload"

    def test_garbage_block_reports_padding(self) -> None:
        """A crafted last block whose decryption ends in 0x00 fails padding."""
        cipher = Aes256Cipher.from_key(bytes(32))
        iv = bytes(16)
        # P = D(C) xor IV; choose C = E(block ending in 0x00)
        c1 = cipher.encrypt_block(b"\x41" * 15 + b"\x00")
        result = CbcCodec(cipher).decrypt(iv + c1)
        assert result.failure is Failure.INVALID_PADDING

    def test_unwrap(self, codec: CbcCodec) -> None:
        assert codec.decrypt(codec.encrypt(b"x").data).unwrap() == b"x"
        with pytest.raises(VaultError) as excinfo:
            codec.decrypt(b"short").unwrap()
        assert excinfo.value.failure is Failure.INVALID_CIPHERTEXT_LENGTH

    def test_result_helpers(self) -> None:
        assert CodecResult.success(b"abc").ok
        assert CodecResult.success("hé".encode()).text == "hé"
        failed = CodecResult.fail(Failure.INVALID_PADDING)
        assert not failed.ok and failed.data == b""


class TestInterop:
    """Byte-compatibility with PyCryptodome AES-256-CBC."""

    @pytest.mark.parametrize("length", [0, 1, 16, 45, 200])
    def test_library_decrypts_ours(self, codec: CbcCodec, length: int) -> None:
        plaintext = bytes(range(length % 256)) * (length // 256 + 1)
        plaintext = plaintext[:length]
        data = codec.encrypt(plaintext).data
        lib = AES.new(derive_key(PASSWORD), AES.MODE_CBC, iv=data[:16])
        assert lib_unpad(lib.decrypt(data[16:]), 16) == plaintext

    @pytest.mark.parametrize("length", [0, 7, 32, 99])
    def test_we_decrypt_library(self, length: int) -> None:
        rng = random.Random(length)
        plaintext = rng.randbytes(length)
        iv = rng.randbytes(16)
        lib = AES.new(derive_key(PASSWORD), AES.MODE_CBC, iv=iv)
        data = iv + lib.encrypt(lib_pad(plaintext, 16))
        assert decrypt(data, PASSWORD).data == plaintext

    def test_padding_matches_library(self) -> None:
        for length in range(40):
            assert pad(bytes(length)) == lib_pad(bytes(length), 16)


class TestTracing:
    def test_block_events_recorded(self) -> None:
        tracer = TraceRecorder()
        codec = CbcCodec(Aes256Cipher.from_password(PASSWORD), SeededRandomSource(1), tracer)
        data = codec.encrypt(b"x" * 20).data
        codec.decrypt(data)
        ops = [r["operation"] for r in tracer.get_records()]
        assert ops == ["cbc_encrypt_block"] * 2 + ["cbc_decrypt_block"] * 2
