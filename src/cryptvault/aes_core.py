"""
AES-256 primitives: lookup tables, GF(2^8) arithmetic, key expansion and
the four round transforms with their inverses.

All transforms take a 4x4 column-major state (see utils) and return a new
state; inputs are never modified in place.

Round keys are kept as 16-byte ``bytes`` objects so a schedule is an
immutable tuple that can be shared freely.
"""

from __future__ import annotations

# Nk / Nr / Nb for AES-256
KEY_WORDS = 8
NUM_ROUNDS = 14
BLOCK_WORDS = 4

KEY_SIZE = 4 * KEY_WORDS
BLOCK_SIZE = 4 * BLOCK_WORDS

# Rijndael S-box
SBOX = bytes([
    0x63, 0x7c, 0x77, 0x7b, 0xf2, 0x6b, 0x6f, 0xc5, 0x30, 0x01, 0x67, 0x2b, 0xfe, 0xd7, 0xab, 0x76,
    0xca, 0x82, 0xc9, 0x7d, 0xfa, 0x59, 0x47, 0xf0, 0xad, 0xd4, 0xa2, 0xaf, 0x9c, 0xa4, 0x72, 0xc0,
    0xb7, 0xfd, 0x93, 0x26, 0x36, 0x3f, 0xf7, 0xcc, 0x34, 0xa5, 0xe5, 0xf1, 0x71, 0xd8, 0x31, 0x15,
    0x04, 0xc7, 0x23, 0xc3, 0x18, 0x96, 0x05, 0x9a, 0x07, 0x12, 0x80, 0xe2, 0xeb, 0x27, 0xb2, 0x75,
    0x09, 0x83, 0x2c, 0x1a, 0x1b, 0x6e, 0x5a, 0xa0, 0x52, 0x3b, 0xd6, 0xb3, 0x29, 0xe3, 0x2f, 0x84,
    0x53, 0xd1, 0x00, 0xed, 0x20, 0xfc, 0xb1, 0x5b, 0x6a, 0xcb, 0xbe, 0x39, 0x4a, 0x4c, 0x58, 0xcf,
    0xd0, 0xef, 0xaa, 0xfb, 0x43, 0x4d, 0x33, 0x85, 0x45, 0xf9, 0x02, 0x7f, 0x50, 0x3c, 0x9f, 0xa8,
    0x51, 0xa3, 0x40, 0x8f, 0x92, 0x9d, 0x38, 0xf5, 0xbc, 0xb6, 0xda, 0x21, 0x10, 0xff, 0xf3, 0xd2,
    0xcd, 0x0c, 0x13, 0xec, 0x5f, 0x97, 0x44, 0x17, 0xc4, 0xa7, 0x7e, 0x3d, 0x64, 0x5d, 0x19, 0x73,
    0x60, 0x81, 0x4f, 0xdc, 0x22, 0x2a, 0x90, 0x88, 0x46, 0xee, 0xb8, 0x14, 0xde, 0x5e, 0x0b, 0xdb,
    0xe0, 0x32, 0x3a, 0x0a, 0x49, 0x06, 0x24, 0x5c, 0xc2, 0xd3, 0xac, 0x62, 0x91, 0x95, 0xe4, 0x79,
    0xe7, 0xc8, 0x37, 0x6d, 0x8d, 0xd5, 0x4e, 0xa9, 0x6c, 0x56, 0xf4, 0xea, 0x65, 0x7a, 0xae, 0x08,
    0xba, 0x78, 0x25, 0x2e, 0x1c, 0xa6, 0xb4, 0xc6, 0xe8, 0xdd, 0x74, 0x1f, 0x4b, 0xbd, 0x8b, 0x8a,
    0x70, 0x3e, 0xb5, 0x66, 0x48, 0x03, 0xf6, 0x0e, 0x61, 0x35, 0x57, 0xb9, 0x86, 0xc1, 0x1d, 0x9e,
    0xe1, 0xf8, 0x98, 0x11, 0x69, 0xd9, 0x8e, 0x94, 0x9b, 0x1e, 0x87, 0xe9, 0xce, 0x55, 0x28, 0xdf,
    0x8c, 0xa1, 0x89, 0x0d, 0xbf, 0xe6, 0x42, 0x68, 0x41, 0x99, 0x2d, 0x0f, 0xb0, 0x54, 0xbb, 0x16,
])

# Inverse S-box
INV_SBOX = bytes([
    0x52, 0x09, 0x6a, 0xd5, 0x30, 0x36, 0xa5, 0x38, 0xbf, 0x40, 0xa3, 0x9e, 0x81, 0xf3, 0xd7, 0xfb,
    0x7c, 0xe3, 0x39, 0x82, 0x9b, 0x2f, 0xff, 0x87, 0x34, 0x8e, 0x43, 0x44, 0xc4, 0xde, 0xe9, 0xcb,
    0x54, 0x7b, 0x94, 0x32, 0xa6, 0xc2, 0x23, 0x3d, 0xee, 0x4c, 0x95, 0x0b, 0x42, 0xfa, 0xc3, 0x4e,
    0x08, 0x2e, 0xa1, 0x66, 0x28, 0xd9, 0x24, 0xb2, 0x76, 0x5b, 0xa2, 0x49, 0x6d, 0x8b, 0xd1, 0x25,
    0x72, 0xf8, 0xf6, 0x64, 0x86, 0x68, 0x98, 0x16, 0xd4, 0xa4, 0x5c, 0xcc, 0x5d, 0x65, 0xb6, 0x92,
    0x6c, 0x70, 0x48, 0x50, 0xfd, 0xed, 0xb9, 0xda, 0x5e, 0x15, 0x46, 0x57, 0xa7, 0x8d, 0x9d, 0x84,
    0x90, 0xd8, 0xab, 0x00, 0x8c, 0xbc, 0xd3, 0x0a, 0xf7, 0xe4, 0x58, 0x05, 0xb8, 0xb3, 0x45, 0x06,
    0xd0, 0x2c, 0x1e, 0x8f, 0xca, 0x3f, 0x0f, 0x02, 0xc1, 0xaf, 0xbd, 0x03, 0x01, 0x13, 0x8a, 0x6b,
    0x3a, 0x91, 0x11, 0x41, 0x4f, 0x67, 0xdc, 0xea, 0x97, 0xf2, 0xcf, 0xce, 0xf0, 0xb4, 0xe6, 0x73,
    0x96, 0xac, 0x74, 0x22, 0xe7, 0xad, 0x35, 0x85, 0xe2, 0xf9, 0x37, 0xe8, 0x1c, 0x75, 0xdf, 0x6e,
    0x47, 0xf1, 0x1a, 0x71, 0x1d, 0x29, 0xc5, 0x89, 0x6f, 0xb7, 0x62, 0x0e, 0xaa, 0x18, 0xbe, 0x1b,
    0xfc, 0x56, 0x3e, 0x4b, 0xc6, 0xd2, 0x79, 0x20, 0x9a, 0xdb, 0xc0, 0xfe, 0x78, 0xcd, 0x5a, 0xf4,
    0x1f, 0xdd, 0xa8, 0x33, 0x88, 0x07, 0xc7, 0x31, 0xb1, 0x12, 0x10, 0x59, 0x27, 0x80, 0xec, 0x5f,
    0x60, 0x51, 0x7f, 0xa9, 0x19, 0xb5, 0x4a, 0x0d, 0x2d, 0xe5, 0x7a, 0x9f, 0x93, 0xc9, 0x9c, 0xef,
    0xa0, 0xe0, 0x3b, 0x4d, 0xae, 0x2a, 0xf5, 0xb0, 0xc8, 0xeb, 0xbb, 0x3c, 0x83, 0x53, 0x99, 0x61,
    0x17, 0x2b, 0x04, 0x7e, 0xba, 0x77, 0xd6, 0x26, 0xe1, 0x69, 0x14, 0x63, 0x55, 0x21, 0x0c, 0x7d,
])

# Round constants, indexed by i // KEY_WORDS (index 0 unused)
RCON = (0x00, 0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40)


# ------------------------------------------------------------------
# GF(2^8) arithmetic, modulus x^8 + x^4 + x^3 + x + 1 (0x11B)
# ------------------------------------------------------------------

def xtime(a: int) -> int:
    """Multiply by x in GF(2^8)."""
    return ((a << 1) ^ 0x1b) & 0xff if a & 0x80 else (a << 1) & 0xff


def gmul(a: int, b: int) -> int:
    """Multiply two bytes in GF(2^8) (shift-and-add)."""
    p = 0
    while b:
        if b & 1:
            p ^= a
        a = xtime(a)
        b >>= 1
    return p


# ------------------------------------------------------------------
# Key schedule
# ------------------------------------------------------------------

def sub_word(word: list[int]) -> list[int]:
    """Apply the S-box to each byte of a 4-byte word."""
    return [SBOX[b] for b in word]


def rot_word(word: list[int]) -> list[int]:
    """Rotate a 4-byte word left by one byte."""
    return word[1:] + word[:1]


def key_expansion(key: bytes) -> tuple[bytes, ...]:
    """
    Expand a 32-byte key into 15 round keys of 16 bytes each.

    Args:
        key: 32-byte AES-256 key

    Returns:
        Tuple of 15 round keys (round 0 .. round 14)

    Raises:
        ValueError: If key is not 32 bytes
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")

    total_words = BLOCK_WORDS * (NUM_ROUNDS + 1)  # 60
    w = [list(key[i:i + 4]) for i in range(0, KEY_SIZE, 4)]

    for i in range(KEY_WORDS, total_words):
        temp = w[i - 1][:]
        if i % KEY_WORDS == 0:
            temp = sub_word(rot_word(temp))
            temp[0] ^= RCON[i // KEY_WORDS]
        elif i % KEY_WORDS == 4:
            temp = sub_word(temp)
        w.append([w[i - KEY_WORDS][j] ^ temp[j] for j in range(4)])

    round_keys = []
    for round_num in range(NUM_ROUNDS + 1):
        rk: list[int] = []
        for col in range(BLOCK_WORDS):
            rk.extend(w[round_num * BLOCK_WORDS + col])
        round_keys.append(bytes(rk))
    return tuple(round_keys)


# ------------------------------------------------------------------
# Round transforms
# ------------------------------------------------------------------

def sub_bytes(state: list[list[int]]) -> list[list[int]]:
    return [[SBOX[b] for b in row] for row in state]


def inv_sub_bytes(state: list[list[int]]) -> list[list[int]]:
    return [[INV_SBOX[b] for b in row] for row in state]


def shift_rows(state: list[list[int]]) -> list[list[int]]:
    """Rotate row r left by r positions."""
    return [state[r][r:] + state[r][:r] for r in range(4)]


def inv_shift_rows(state: list[list[int]]) -> list[list[int]]:
    """Rotate row r right by r positions."""
    return [state[r][4 - r:] + state[r][:4 - r] for r in range(4)]


def _mix_single_column(a: list[int]) -> list[int]:
    c = [xtime(x) for x in a]
    return [
        c[0] ^ a[1] ^ c[1] ^ a[2] ^ a[3],
        a[0] ^ c[1] ^ a[2] ^ c[2] ^ a[3],
        a[0] ^ a[1] ^ c[2] ^ a[3] ^ c[3],
        c[0] ^ a[0] ^ a[1] ^ a[2] ^ c[3],
    ]


def _inv_mix_single_column(a: list[int]) -> list[int]:
    return [
        gmul(a[0], 14) ^ gmul(a[1], 11) ^ gmul(a[2], 13) ^ gmul(a[3], 9),
        gmul(a[0], 9) ^ gmul(a[1], 14) ^ gmul(a[2], 11) ^ gmul(a[3], 13),
        gmul(a[0], 13) ^ gmul(a[1], 9) ^ gmul(a[2], 14) ^ gmul(a[3], 11),
        gmul(a[0], 11) ^ gmul(a[1], 13) ^ gmul(a[2], 9) ^ gmul(a[3], 14),
    ]


def _map_columns(state: list[list[int]], fn) -> list[list[int]]:
    result = [[0] * 4 for _ in range(4)]
    for col in range(4):
        mixed = fn([state[row][col] for row in range(4)])
        for row in range(4):
            result[row][col] = mixed[row]
    return result


def mix_columns(state: list[list[int]]) -> list[list[int]]:
    """Multiply each column by the fixed MDS matrix {02 03 01 01}."""
    return _map_columns(state, _mix_single_column)


def inv_mix_columns(state: list[list[int]]) -> list[list[int]]:
    """Multiply each column by the inverse matrix {0e 0b 0d 09}."""
    return _map_columns(state, _inv_mix_single_column)


def add_round_key(state: list[list[int]], round_key: bytes) -> list[list[int]]:
    """XOR a 16-byte round key (column-major) into the state."""
    return [
        [state[row][col] ^ round_key[col * 4 + row] for col in range(4)]
        for row in range(4)
    ]
