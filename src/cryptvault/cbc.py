"""
CBC mode over the AES-256 block cipher.

Ciphertext layout:
    IV (16 bytes) || C1 || C2 || ... || Cn      (n >= 1, 16 bytes each)

Encryption: C_i = E(P_i xor C_{i-1}), with C_0 = IV.
Decryption: P_i = D(C_i) xor C_{i-1}.

Failures are returned as CodecResult values, never raised.
"""

from __future__ import annotations

from .aes_core import BLOCK_SIZE
from .cipher import Aes256Cipher
from .interfaces import CodecResult, Failure
from .padding import pad, unpad
from .randomness import RandomSource, create_random_source
from .trace import TraceRecorder
from .utils import xor_bytes

IV_SIZE = BLOCK_SIZE
MIN_CIPHERTEXT_SIZE = IV_SIZE + BLOCK_SIZE


def valid_ciphertext_length(length: int) -> bool:
    """True if ``length`` fits IV plus at least one whole block."""
    return length >= MIN_CIPHERTEXT_SIZE and (length - IV_SIZE) % BLOCK_SIZE == 0


class CbcCodec:
    """
    Encrypts and decrypts whole in-memory buffers in CBC mode.

    The codec holds no per-message state: the cipher is immutable and the
    IV is drawn fresh for every ``encrypt`` call.
    """

    def __init__(
        self,
        cipher: Aes256Cipher,
        random_source: RandomSource | None = None,
        tracer: TraceRecorder | None = None,
    ):
        """
        Args:
            cipher: Expanded AES-256 cipher
            random_source: IV source (default: platform CSPRNG)
            tracer: Optional recorder for per-block events
        """
        self.cipher = cipher
        self.random_source = random_source or create_random_source("auto")
        self.tracer = tracer

    @classmethod
    def from_password(
        cls,
        password: str | bytes,
        random_source: RandomSource | None = None,
    ) -> CbcCodec:
        return cls(Aes256Cipher.from_password(password), random_source)

    def encrypt(self, plaintext: bytes) -> CodecResult:
        """
        Pad, draw an IV and chain-encrypt ``plaintext``.

        Returns:
            CodecResult with IV || ciphertext blocks, or a
            RANDOM_GENERATION failure
        """
        padded = pad(plaintext)

        iv = self.random_source.get_bytes(IV_SIZE)
        if iv is None:
            return CodecResult.fail(Failure.RANDOM_GENERATION)

        out = bytearray(iv)
        prev = iv
        for index, offset in enumerate(range(0, len(padded), BLOCK_SIZE)):
            block = xor_bytes(padded[offset:offset + BLOCK_SIZE], prev)
            prev = self.cipher.encrypt_block(block)
            out += prev
            if self.tracer:
                self.tracer.record(operation="cbc_encrypt_block", block=index, ciphertext=prev)

        return CodecResult.success(bytes(out))

    def decrypt(self, ciphertext: bytes) -> CodecResult:
        """
        Chain-decrypt ``ciphertext`` and strip the padding.

        Returns:
            CodecResult with the plaintext, or an INVALID_CIPHERTEXT_LENGTH
            / INVALID_PADDING failure
        """
        if not valid_ciphertext_length(len(ciphertext)):
            return CodecResult.fail(Failure.INVALID_CIPHERTEXT_LENGTH)

        prev = bytes(ciphertext[:IV_SIZE])
        out = bytearray()
        for index, offset in enumerate(range(IV_SIZE, len(ciphertext), BLOCK_SIZE)):
            block = bytes(ciphertext[offset:offset + BLOCK_SIZE])
            out += xor_bytes(self.cipher.decrypt_block(block), prev)
            prev = block
            if self.tracer:
                self.tracer.record(operation="cbc_decrypt_block", block=index, ciphertext=block)

        plaintext = unpad(bytes(out))
        if plaintext is None:
            return CodecResult.fail(Failure.INVALID_PADDING)
        return CodecResult.success(plaintext)


def encrypt(
    plaintext: bytes,
    password: str | bytes,
    random_source: RandomSource | None = None,
) -> CodecResult:
    """One-shot password encryption."""
    return CbcCodec.from_password(password, random_source).encrypt(plaintext)


def decrypt(ciphertext: bytes, password: str | bytes) -> CodecResult:
    """One-shot password decryption."""
    return CbcCodec.from_password(password).decrypt(ciphertext)
