"""
Helpers shared by the block cipher, the CBC codec and the tracer.

A block lives in two shapes. On the wire it is 16 bytes; inside the
cipher it is a 4x4 grid indexed ``state[row][col]``, filled column by
column, so byte ``i`` sits at row ``i % 4``, column ``i // 4``.
"""

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def bytes_to_state(data: bytes) -> list[list[int]]:
    """Lay a 16-byte block out as a 4x4 grid, column by column."""
    if len(data) != 16:
        raise ValueError(f"Expected 16 bytes, got {len(data)}")
    return [[data[col * 4 + row] for col in range(4)] for row in range(4)]


def state_to_bytes(state: list[list[int]]) -> bytes:
    return bytes(state[i % 4][i // 4] for i in range(16))


def copy_state(state: list[list[int]]) -> list[list[int]]:
    return [list(row) for row in state]


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Parse user-supplied hex (keys, blocks, text-mode ciphertext).

    Leading and trailing whitespace is dropped; any other stray character,
    including embedded spaces or a ``0x`` prefix, is an error.

    Raises:
        ValueError: On odd length or non-hex characters
    """
    hex_str = hex_str.strip()
    if len(hex_str) % 2:
        raise ValueError(f"Hex string has odd length {len(hex_str)}")
    bad = set(hex_str) - _HEX_DIGITS
    if bad:
        raise ValueError(f"Non-hex characters in input: {''.join(sorted(bad))!r}")
    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes) -> str:
    return data.hex()


def state_to_hex(state: list[list[int]]) -> str:
    """Block hex of a grid, in wire byte order."""
    return bytes_to_hex(state_to_bytes(state))


def format_state_grid(state: list[list[int]]) -> str:
    """Render a grid as four indented rows, e.g. ``  00 44 88 cc``."""
    return "\n".join("  " + " ".join(f"{b:02x}" for b in row) for row in state)


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two equal-length buffers (CBC chaining)."""
    if len(a) != len(b):
        raise ValueError(f"Length mismatch: {len(a)} vs {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))
