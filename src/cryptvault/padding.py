"""PKCS#7 padding for the 16-byte AES block."""

from __future__ import annotations

from .aes_core import BLOCK_SIZE


def pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Append 1..block_size bytes, each holding the pad length.

    Data already aligned to the block size gets a full extra block.
    """
    if not 1 <= block_size <= 255:
        raise ValueError(f"block_size must be 1..255, got {block_size}")
    pad_len = block_size - (len(data) % block_size)
    return bytes(data) + bytes([pad_len]) * pad_len


def unpad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes | None:
    """Strip PKCS#7 padding.

    Returns:
        The unpadded bytes, or None if ``data`` is empty, not block
        aligned, or its padding bytes are inconsistent.
    """
    if not data or len(data) % block_size:
        return None
    pad_len = data[-1]
    if not 1 <= pad_len <= block_size:
        return None
    if any(b != pad_len for b in data[-pad_len:]):
        return None
    return bytes(data[:-pad_len])
