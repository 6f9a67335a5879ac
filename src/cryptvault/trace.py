"""
Step tracing for the block cipher and the CBC codec.

The cipher emits one record per round transform; the codec emits one per
chained block. A recorder keeps every record in memory and can also echo
them as they arrive: JSON Lines to an open file, a one-line summary per
state change to stdout.
"""

import json
from typing import Any, TextIO

from .utils import state_to_hex


def _is_state(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 4
        and all(isinstance(row, list) and len(row) == 4 for row in value)
    )


def _to_json(value: Any) -> Any:
    # grids and raw bytes both go out as block hex
    if _is_state(value):
        return state_to_hex(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


class TraceRecorder:
    """
    Collects trace records emitted during encryption and decryption.

    Args:
        verbose: Print ``ENC R3   MixColumns  STATE:<hex>`` lines to stdout
        trace_file: Open text stream receiving one JSON object per record
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **fields) -> None:
        self._records.append(fields)
        if self.trace_file:
            self.trace_file.write(json.dumps(_to_json(fields)) + "\n")
            self.trace_file.flush()
        if self.verbose and "state" in fields:
            tag = fields.get("direction", "?")[:3].upper()
            round_num = fields.get("round", "?")
            operation = fields.get("operation", "unknown")
            print(f"{tag} R{round_num:<2}  {operation:16s} STATE:{state_to_hex(fields['state'])}")

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


def print_header(title: str) -> None:
    bar = "#" * 70
    print(f"\n{bar}\n# {title}\n{bar}")


def print_result(ciphertext_hex: str, steps: int, passed: bool = True) -> None:
    """Summary block printed by ``cryptvault trace``."""
    bar = "=" * 70
    verdict = "[OK] PASS" if passed else "[ERROR] FAIL"
    print(f"\n{bar}\nRESULT\n{bar}")
    print(f"Output block: {ciphertext_hex}")
    print(f"Trace steps: {steps}")
    print(f"Verification: {verdict}")
    print(bar)
