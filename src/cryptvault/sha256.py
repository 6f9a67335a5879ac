"""SHA-256 (FIPS 180-4) in pure Python.

Used both as the general file digest and as the password-to-key
derivation. The constants below are the first 32 bits of the fractional
parts of the cube roots (K) and square roots (H0) of the first primes.
"""

from __future__ import annotations

K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)

H0 = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

DIGEST_SIZE = 32
BLOCK_SIZE = 64

_MASK = 0xFFFFFFFF


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _ch(x: int, y: int, z: int) -> int:
    return (x & y) ^ (~x & z)


def _maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)


def _big_sigma0(x: int) -> int:
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def _big_sigma1(x: int) -> int:
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def _small_sigma0(x: int) -> int:
    return _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)


def _small_sigma1(x: int) -> int:
    return _rotr(x, 17) ^ _rotr(x, 19) ^ (x >> 10)


def pad_message(data: bytes) -> bytes:
    """Append 0x80, zero-fill to 56 mod 64, then the 64-bit big-endian bit length."""
    bit_length = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
    zeros = (55 - len(data)) % BLOCK_SIZE
    return data + b"\x80" + b"\x00" * zeros + bit_length.to_bytes(8, "big")


def _compress(h: list[int], block: bytes) -> list[int]:
    """Run the 64-round compression function over one 64-byte block."""
    w = [int.from_bytes(block[i:i + 4], "big") for i in range(0, BLOCK_SIZE, 4)]
    for i in range(16, 64):
        w.append(
            (_small_sigma1(w[i - 2]) + w[i - 7] + _small_sigma0(w[i - 15]) + w[i - 16]) & _MASK
        )

    a, b, c, d, e, f, g, hh = h
    for i in range(64):
        t1 = (hh + _big_sigma1(e) + _ch(e, f, g) + K[i] + w[i]) & _MASK
        t2 = (_big_sigma0(a) + _maj(a, b, c)) & _MASK
        hh = g
        g = f
        f = e
        e = (d + t1) & _MASK
        d = c
        c = b
        b = a
        a = (t1 + t2) & _MASK

    return [(x + y) & _MASK for x, y in zip(h, (a, b, c, d, e, f, g, hh))]


def sha256(data: bytes) -> bytes:
    """Compute the SHA-256 digest of ``data``.

    Args:
        data: Message of any length

    Returns:
        32-byte digest
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"data must be bytes-like, got {type(data).__name__}")

    message = pad_message(bytes(data))
    h = list(H0)
    for offset in range(0, len(message), BLOCK_SIZE):
        h = _compress(h, message[offset:offset + BLOCK_SIZE])

    return b"".join(word.to_bytes(4, "big") for word in h)


def sha256_hex(data: bytes) -> str:
    """Lowercase hex digest of ``data``."""
    return sha256(data).hex()
