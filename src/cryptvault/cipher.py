"""
AES-256 block cipher.

Round schedule (14 rounds):
- Round 0:      AddRoundKey
- Rounds 1-13:  SubBytes, ShiftRows, MixColumns, AddRoundKey
- Round 14:     SubBytes, ShiftRows, AddRoundKey (no MixColumns)

Decryption walks the same schedule backwards with the inverse
transforms and the round keys in reverse order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .aes_core import (
    BLOCK_SIZE,
    KEY_SIZE,
    NUM_ROUNDS,
    add_round_key,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    key_expansion,
    mix_columns,
    shift_rows,
    sub_bytes,
)
from .kdf import derive_key
from .trace import TraceRecorder
from .utils import bytes_to_state, copy_state, state_to_bytes

# (round, operations), applied in order
ENCRYPT_SCHEDULE = (
    [(0, ("AddRoundKey",))]
    + [(r, ("SubBytes", "ShiftRows", "MixColumns", "AddRoundKey")) for r in range(1, NUM_ROUNDS)]
    + [(NUM_ROUNDS, ("SubBytes", "ShiftRows", "AddRoundKey"))]
)

DECRYPT_SCHEDULE = (
    [(NUM_ROUNDS, ("AddRoundKey",))]
    + [
        (r, ("InvShiftRows", "InvSubBytes", "AddRoundKey", "InvMixColumns"))
        for r in range(NUM_ROUNDS - 1, 0, -1)
    ]
    + [(0, ("InvShiftRows", "InvSubBytes", "AddRoundKey"))]
)

_STATE_OPS = {
    "SubBytes": sub_bytes,
    "ShiftRows": shift_rows,
    "MixColumns": mix_columns,
    "InvSubBytes": inv_sub_bytes,
    "InvShiftRows": inv_shift_rows,
    "InvMixColumns": inv_mix_columns,
}


@dataclass(frozen=True)
class Aes256Cipher:
    """
    Immutable AES-256 cipher: a key and its 15-entry round-key schedule.

    Build one per password with ``from_key`` or ``from_password``. Block
    operations never mutate the instance, so it may be shared between
    threads and reused across any number of blocks.
    """

    key: bytes = field(repr=False)
    round_keys: tuple[bytes, ...] = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, (bytes, bytearray)):
            raise TypeError("key must be bytes")
        if len(self.key) != KEY_SIZE:
            raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(self.key)}")
        if len(self.round_keys) != NUM_ROUNDS + 1:
            raise ValueError(
                f"Schedule must have {NUM_ROUNDS + 1} round keys, got {len(self.round_keys)}"
            )

    @classmethod
    def from_key(cls, key: bytes) -> Aes256Cipher:
        """Expand ``key`` (32 bytes) into a ready cipher."""
        key = bytes(key)
        return cls(key=key, round_keys=key_expansion(key))

    @classmethod
    def from_password(cls, password: str | bytes) -> Aes256Cipher:
        """Derive the key from ``password`` and expand it."""
        return cls.from_key(derive_key(password))

    def encrypt_block(self, block: bytes, tracer: TraceRecorder | None = None) -> bytes:
        """
        Encrypt a single 16-byte block.

        Args:
            block: 16-byte plaintext block
            tracer: Optional trace recorder, one record per transform

        Returns:
            16-byte ciphertext block
        """
        return self._run(block, ENCRYPT_SCHEDULE, "encrypt", tracer)

    def decrypt_block(self, block: bytes, tracer: TraceRecorder | None = None) -> bytes:
        """
        Decrypt a single 16-byte block.

        Args:
            block: 16-byte ciphertext block
            tracer: Optional trace recorder, one record per transform

        Returns:
            16-byte plaintext block
        """
        return self._run(block, DECRYPT_SCHEDULE, "decrypt", tracer)

    def _run(
        self,
        block: bytes,
        schedule: list[tuple[int, tuple[str, ...]]],
        direction: str,
        tracer: TraceRecorder | None,
    ) -> bytes:
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"Block must be {BLOCK_SIZE} bytes, got {len(block)}")

        state = bytes_to_state(block)
        if tracer:
            tracer.record(direction=direction, round="-", operation="input",
                          state=copy_state(state))

        for round_num, operations in schedule:
            round_key = self.round_keys[round_num]
            for op in operations:
                if op == "AddRoundKey":
                    state = add_round_key(state, round_key)
                else:
                    state = _STATE_OPS[op](state)

                if tracer:
                    record = {
                        "direction": direction,
                        "round": round_num,
                        "operation": op,
                        "state": copy_state(state),
                    }
                    if op == "AddRoundKey":
                        record["round_key"] = round_key
                    tracer.record(**record)

        return state_to_bytes(state)
