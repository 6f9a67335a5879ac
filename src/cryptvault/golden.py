"""Golden reference implementations using PyCryptodome."""

from Crypto.Cipher import AES
from Crypto.Hash import SHA256


def golden_encrypt_block(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt a single block using PyCryptodome as golden reference.

    Args:
        key: 32-byte AES-256 key
        plaintext: 16-byte plaintext block

    Returns:
        16-byte ciphertext block

    Raises:
        ValueError: If key is not 32 bytes or plaintext is not 16 bytes
    """
    if len(key) != 32:
        raise ValueError(f"Key must be 32 bytes, got {len(key)}")
    if len(plaintext) != 16:
        raise ValueError(f"Plaintext must be 16 bytes, got {len(plaintext)}")

    cipher = AES.new(key, AES.MODE_ECB)
    return cipher.encrypt(plaintext)


def golden_sha256(data: bytes) -> bytes:
    """SHA-256 digest from PyCryptodome."""
    return SHA256.new(data).digest()


def golden_cbc_encrypt(key: bytes, iv: bytes, padded: bytes) -> bytes:
    """CBC-encrypt already padded data; returns IV || ciphertext."""
    return iv + AES.new(key, AES.MODE_CBC, iv=iv).encrypt(padded)


def golden_cbc_decrypt(key: bytes, data: bytes) -> bytes:
    """CBC-decrypt IV || ciphertext without removing padding."""
    return AES.new(key, AES.MODE_CBC, iv=data[:16]).decrypt(data[16:])


def validate_against_golden(
    key: bytes, plaintext: bytes, candidate_ciphertext: bytes
) -> tuple[bool, str]:
    """Validate a candidate ciphertext block against the golden reference.

    Returns:
        Tuple of (is_correct, error_detail)
    """
    expected = golden_encrypt_block(key, plaintext)
    if candidate_ciphertext == expected:
        return True, ""
    else:
        return False, (
            f"Ciphertext mismatch: expected {expected.hex()}, "
            f"got {candidate_ciphertext.hex()}"
        )


# AES-256 known-answer vectors
FIPS_197_TEST_VECTORS = [
    # Appendix C.3 - AES-256
    {
        "key": bytes.fromhex(
            "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
        ),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("8ea2b7ca516745bfeafc49904b496089"),
    },
    # All-zero key and block
    {
        "key": bytes(32),
        "plaintext": bytes(16),
        "ciphertext": bytes.fromhex("dc95c078a2408989ad48a21492842087"),
    },
    # SP 800-38A F.1.5 (ECB-AES256), block 1
    {
        "key": bytes.fromhex(
            "603deb1015ca71be2b73aef0857d77811f352c073b6108d72d9810a30914dff4"
        ),
        "plaintext": bytes.fromhex("6bc1bee22e409f96e93d7e117393172a"),
        "ciphertext": bytes.fromhex("f3eed1bdb5d2a03c064b5a7e3db181f8"),
    },
]

# FIPS 180-4 / NIST example messages
SHA256_TEST_VECTORS = [
    {
        "message": b"",
        "digest": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
    },
    {
        "message": b"abc",
        "digest": "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad",
    },
    {
        "message": b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
        "digest": "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1",
    },
    {
        "message": (
            b"abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmn"
            b"hijklmnoijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu"
        ),
        "digest": "cf5b16a778af8380036ce59e7b0492370b249b11e8f07a51afac45037afee9d1",
    },
]
