"""
Tests for trace recording of single-block operations.

Verifies:
- One record per transform, in schedule order
- FIPS-197 C.3 intermediate states show up in the trace
- JSONL output is well-formed with hex-serialized states and keys
- Verbose mode prints one line per transform
"""

import io
import json

from cryptvault.cipher import Aes256Cipher
from cryptvault.trace import TraceRecorder, print_header, print_result
from cryptvault.utils import hex_to_bytes, state_to_hex

KEY = hex_to_bytes("000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f")
PT = hex_to_bytes("00112233445566778899aabbccddeeff")

# input + round 0 + 13 full rounds + final round
EXPECTED_RECORDS = 1 + 1 + 13 * 4 + 3


class TestRecords:
    def test_record_count(self) -> None:
        tracer = TraceRecorder()
        Aes256Cipher.from_key(KEY).encrypt_block(PT, tracer)
        assert len(tracer.get_records()) == EXPECTED_RECORDS

    def test_decrypt_record_count(self) -> None:
        tracer = TraceRecorder()
        cipher = Aes256Cipher.from_key(KEY)
        cipher.decrypt_block(cipher.encrypt_block(PT), tracer)
        records = tracer.get_records()
        assert len(records) == EXPECTED_RECORDS
        assert all(r["direction"] == "decrypt" for r in records)

    def test_known_intermediate_states(self) -> None:
        """Round 1 start and round 2 start from FIPS-197 C.3."""
        tracer = TraceRecorder()
        Aes256Cipher.from_key(KEY).encrypt_block(PT, tracer)
        records = tracer.get_records()

        round0 = records[1]
        assert round0["round"] == 0 and round0["operation"] == "AddRoundKey"
        assert state_to_hex(round0["state"]) == "00102030405060708090a0b0c0d0e0f0"

        round1_end = records[5]
        assert round1_end["round"] == 1 and round1_end["operation"] == "AddRoundKey"
        assert state_to_hex(round1_end["state"]) == "4f63760643e0aa85efa7213201a4e705"

        assert state_to_hex(records[-1]["state"]) == "8ea2b7ca516745bfeafc49904b496089"

    def test_round_key_attached_to_add_round_key(self) -> None:
        tracer = TraceRecorder()
        cipher = Aes256Cipher.from_key(KEY)
        cipher.encrypt_block(PT, tracer)
        ark = [r for r in tracer.get_records() if r["operation"] == "AddRoundKey"]
        assert [r["round_key"] for r in ark] == list(cipher.round_keys)

    def test_trace_does_not_change_result(self) -> None:
        cipher = Aes256Cipher.from_key(KEY)
        assert cipher.encrypt_block(PT, TraceRecorder()) == cipher.encrypt_block(PT)

    def test_clear(self) -> None:
        tracer = TraceRecorder()
        tracer.record(operation="x")
        tracer.clear()
        assert tracer.get_records() == []


class TestJsonl:
    def test_jsonl_well_formed(self) -> None:
        buf = io.StringIO()
        tracer = TraceRecorder(trace_file=buf)
        Aes256Cipher.from_key(KEY).encrypt_block(PT, tracer)

        lines = buf.getvalue().strip().splitlines()
        assert len(lines) == EXPECTED_RECORDS
        for line in lines:
            entry = json.loads(line)
            assert "operation" in entry
            assert isinstance(entry["state"], str) and len(entry["state"]) == 32
            if "round_key" in entry:
                assert len(entry["round_key"]) == 32

    def test_bytes_serialized_as_hex(self) -> None:
        buf = io.StringIO()
        TraceRecorder(trace_file=buf).record(operation="x", ciphertext=b"\x01\xff")
        assert json.loads(buf.getvalue()) == {"operation": "x", "ciphertext": "01ff"}


class TestVerbose:
    def test_verbose_prints_each_step(self, capsys) -> None:
        tracer = TraceRecorder(verbose=True)
        Aes256Cipher.from_key(KEY).encrypt_block(PT, tracer)
        out = capsys.readouterr().out.strip().splitlines()
        assert len(out) == EXPECTED_RECORDS
        assert out[-1].startswith("ENC R14")
        assert out[-1].endswith("STATE:8ea2b7ca516745bfeafc49904b496089")

    def test_silent_by_default(self, capsys) -> None:
        Aes256Cipher.from_key(KEY).encrypt_block(PT, TraceRecorder())
        assert capsys.readouterr().out == ""

    def test_print_helpers(self, capsys) -> None:
        print_header("Title")
        print_result("00" * 16, 57, passed=False)
        out = capsys.readouterr().out
        assert "# Title" in out
        assert "Trace steps: 57" in out
        assert "[ERROR] FAIL" in out
