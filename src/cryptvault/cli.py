"""Command-line interface for cryptvault."""

from __future__ import annotations

import json
import random
import sys
from typing import TextIO

import click

from . import __version__
from .cipher import Aes256Cipher
from .config import VaultConfig
from .golden import (
    FIPS_197_TEST_VECTORS,
    SHA256_TEST_VECTORS,
    golden_sha256,
    validate_against_golden,
)
from .interfaces import FileOutcome
from .kdf import password_strength
from .sha256 import sha256, sha256_hex
from .trace import TraceRecorder, print_header, print_result
from .utils import bytes_to_hex, bytes_to_state, format_state_grid, hex_to_bytes
from .vault import Vault, hash_file

# FIPS-197 Appendix C.3
DEFAULT_KEY_HEX = "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
DEFAULT_PT_HEX = "00112233445566778899aabbccddeeff"

_STRENGTH_LABELS = {
    "weak": "Weak",
    "medium": "Medium",
    "strong": "Strong",
}

password_option = click.option(
    "--password", "-p",
    type=str,
    default=None,
    help="Password (prompted for when omitted)",
)


# CSPRNG-backed sources only; "seeded" repeats its IVs across runs
CLI_RANDOM_SOURCES = ("auto", "system", "urandom")


@click.group()
@click.version_option(version=__version__, prog_name="cryptvault")
@click.option(
    "--random-source",
    type=click.Choice(CLI_RANDOM_SOURCES),
    default="auto",
    show_default=True,
    help="Where IVs come from",
)
@click.option(
    "--no-overwrite",
    is_flag=True,
    help="Fail instead of replacing an existing output file",
)
@click.pass_context
def main(ctx: click.Context, random_source: str, no_overwrite: bool) -> None:
    """Crypt Vault: AES-256-CBC file and text encryption.

    Keys are the SHA-256 of the password; each encryption draws a fresh
    random IV which is stored in front of the ciphertext.
    """
    ctx.obj = VaultConfig(random_source=random_source, overwrite=not no_overwrite)


def _get_password(password: str | None, confirm: bool) -> str:
    if password is None:
        password = click.prompt(
            "Enter password",
            hide_input=True,
            confirmation_prompt=confirm,
            default="",
            show_default=False,
        )
    if not password:
        click.echo("Error: Password cannot be empty.", err=True)
        sys.exit(2)
    if confirm:
        label = _STRENGTH_LABELS[password_strength(password).value]
        click.echo(f"Password strength: {label}", err=True)
    return password


def _report(outcome: FileOutcome, verb: str) -> None:
    if outcome.ok:
        click.echo(
            f"[OK] {outcome.source} -> {outcome.destination} "
            f"({outcome.size_bytes} bytes, {outcome.elapsed_s:.4f}s)"
        )
    else:
        click.echo(f"[FAIL] {outcome.source}: {verb} failed: {outcome.error_detail}", err=True)


@main.command(name="encrypt-file")
@click.argument("source", type=click.Path(dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Output file (default: SOURCE.enc)")
@password_option
@click.pass_obj
def encrypt_file_cmd(config: VaultConfig, source: str, output: str | None,
                     password: str | None) -> None:
    """Encrypt a file."""
    vault = Vault(_get_password(password, confirm=True), config)
    outcome = vault.encrypt_file(source, output)
    _report(outcome, "encryption")
    if not outcome.ok:
        sys.exit(1)


@main.command(name="decrypt-file")
@click.argument("source", type=click.Path(dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Output file (default: SOURCE without .enc)")
@password_option
@click.pass_obj
def decrypt_file_cmd(config: VaultConfig, source: str, output: str | None,
                     password: str | None) -> None:
    """Decrypt a file."""
    vault = Vault(_get_password(password, confirm=False), config)
    outcome = vault.decrypt_file(source, output)
    _report(outcome, "decryption")
    if not outcome.ok:
        sys.exit(1)


@main.command(name="encrypt-text")
@click.argument("text")
@password_option
@click.pass_obj
def encrypt_text_cmd(config: VaultConfig, text: str, password: str | None) -> None:
    """Encrypt TEXT and print the hex ciphertext."""
    vault = Vault(_get_password(password, confirm=True), config)
    result = vault.encrypt_text(text)
    if not result.ok:
        click.echo(f"Error: {result.failure.description}", err=True)
        sys.exit(1)
    click.echo(result.text)


@main.command(name="decrypt-text")
@click.argument("hex_ciphertext")
@password_option
@click.pass_obj
def decrypt_text_cmd(config: VaultConfig, hex_ciphertext: str, password: str | None) -> None:
    """Decrypt a hex ciphertext and print the text."""
    vault = Vault(_get_password(password, confirm=False), config)
    result = vault.decrypt_text(hex_ciphertext)
    if not result.ok:
        click.echo(f"Error: Decryption failed ({result.failure.description})", err=True)
        sys.exit(1)
    click.echo(result.text)


@main.command(name="batch-encrypt")
@click.argument("sources", nargs=-1, required=True)
@password_option
@click.option("--json", "as_json", is_flag=True, help="Print outcomes as JSON")
@click.pass_obj
def batch_encrypt_cmd(config: VaultConfig, sources: tuple[str, ...],
                      password: str | None, as_json: bool) -> None:
    """Encrypt several files with one password."""
    vault = Vault(_get_password(password, confirm=True), config)
    _finish_batch(vault.batch_encrypt(sources), "encrypted", "encryption", as_json)


@main.command(name="batch-decrypt")
@click.argument("sources", nargs=-1, required=True)
@password_option
@click.option("--json", "as_json", is_flag=True, help="Print outcomes as JSON")
@click.pass_obj
def batch_decrypt_cmd(config: VaultConfig, sources: tuple[str, ...],
                      password: str | None, as_json: bool) -> None:
    """Decrypt several files with one password."""
    vault = Vault(_get_password(password, confirm=False), config)
    _finish_batch(vault.batch_decrypt(sources), "decrypted", "decryption", as_json)


def _finish_batch(outcomes: list[FileOutcome], verb: str, noun: str, as_json: bool) -> None:
    done = sum(1 for o in outcomes if o.ok)
    if as_json:
        click.echo(json.dumps([o.to_dict() for o in outcomes], indent=2))
    else:
        for outcome in outcomes:
            _report(outcome, noun)
        click.echo(f"\nDone! {done}/{len(outcomes)} files {verb}.")
    if done != len(outcomes):
        sys.exit(1)


@main.command(name="hash")
@click.argument("path", type=click.Path(dir_okay=False))
def hash_cmd(path: str) -> None:
    """Print the SHA-256 digest of a file."""
    digest = hash_file(path)
    if digest is None:
        click.echo(f"Error: Cannot open '{path}'", err=True)
        sys.exit(1)
    click.echo(f"{digest}  {path}")


@main.command()
@click.option("--n", "num_tests", type=int, default=100,
              help="Number of random cross-check vectors (default: 100)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def selftest(num_tests: int, seed: int | None, verbose: bool) -> None:
    """Check AES-256 and SHA-256 against known answers and PyCryptodome."""
    failed = 0

    click.echo("Running AES-256 KAT tests...")
    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        cipher = Aes256Cipher.from_key(vec["key"])
        ct = cipher.encrypt_block(vec["plaintext"])
        ok = ct == vec["ciphertext"] and cipher.decrypt_block(ct) == vec["plaintext"]
        failed += not ok
        if verbose or not ok:
            click.echo(f"  [{'PASS' if ok else 'FAIL'}] vector {i}: {bytes_to_hex(ct)}")

    click.echo("Running SHA-256 KAT tests...")
    for i, vec in enumerate(SHA256_TEST_VECTORS):
        digest = sha256_hex(vec["message"])
        ok = digest == vec["digest"]
        failed += not ok
        if verbose or not ok:
            click.echo(f"  [{'PASS' if ok else 'FAIL'}] vector {i}: {digest}")

    click.echo(f"Running {num_tests} random cross-checks against PyCryptodome...")
    rng = random.Random(seed)
    for i in range(num_tests):
        key = rng.randbytes(32)
        block = rng.randbytes(16)
        ct = Aes256Cipher.from_key(key).encrypt_block(block)
        ok, detail = validate_against_golden(key, block, ct)
        message = rng.randbytes(rng.randrange(0, 200))
        if sha256(message) != golden_sha256(message):
            ok = False
            detail = f"SHA-256 mismatch for {len(message)}-byte message"
        failed += not ok
        if not ok:
            click.echo(f"  [FAIL] random {i}: {detail}")

    if failed:
        click.echo(f"\n{failed} check(s) FAILED")
        sys.exit(1)
    click.echo("\nAll checks passed.")


@main.command()
@click.option("--key", "key_hex", default=DEFAULT_KEY_HEX,
              help="AES-256 key as 64 hex chars (default: FIPS-197 C.3 key)")
@click.option("--pt", "pt_hex", default=DEFAULT_PT_HEX,
              help="Block as 32 hex chars (default: FIPS-197 C.3 plaintext)")
@click.option("--decrypt", "direction", flag_value="decrypt",
              help="Trace decryption of the block instead")
@click.option("--encrypt", "direction", flag_value="encrypt", default=True,
              help="Trace encryption of the block (default)")
@click.option("--verbose", is_flag=True, help="Print every transform step")
@click.option("--trace", "trace_path", metavar="FILE", default=None,
              help="Write a JSON Lines trace to FILE")
def trace(key_hex: str, pt_hex: str, direction: str, verbose: bool,
          trace_path: str | None) -> None:
    """Walk a single block through AES-256 round by round."""
    try:
        key = hex_to_bytes(key_hex)
        block = hex_to_bytes(pt_hex)
    except ValueError as e:
        click.echo(f"Error: Invalid hex: {e}", err=True)
        sys.exit(2)
    if len(key) != 32:
        click.echo(f"Error: Key must be 64 hex chars (32 bytes), got {len(key_hex)} chars", err=True)
        sys.exit(2)
    if len(block) != 16:
        click.echo(f"Error: Block must be 32 hex chars (16 bytes), got {len(pt_hex)} chars", err=True)
        sys.exit(2)

    trace_file: TextIO | None = None
    if trace_path:
        try:
            trace_file = open(trace_path, "w")
        except OSError as e:
            click.echo(f"Error: Cannot open trace file: {e}", err=True)
            sys.exit(1)

    try:
        tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
        cipher = Aes256Cipher.from_key(key)

        print_header(f"AES-256 {direction}")
        print(f"Key:   {bytes_to_hex(key)}")
        print(f"Block: {bytes_to_hex(block)}")
        print(format_state_grid(bytes_to_state(block)))

        if direction == "decrypt":
            out = cipher.decrypt_block(block, tracer)
            passed = cipher.encrypt_block(out) == block
        else:
            out = cipher.encrypt_block(block, tracer)
            passed, _ = validate_against_golden(key, block, out)

        print_result(bytes_to_hex(out), len(tracer.get_records()), passed)
        if not passed:
            sys.exit(1)
    finally:
        if trace_file:
            trace_file.close()


if __name__ == "__main__":
    main()
