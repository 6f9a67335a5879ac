"""Application layer: text, file, batch and hashing operations.

Everything here works on whole buffers. Files are read fully into memory
before being handed to the codec, and written only when the codec
succeeded.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Iterable

from .cbc import CbcCodec
from .cipher import Aes256Cipher
from .config import VaultConfig
from .interfaces import CodecResult, Failure, FileOutcome
from .randomness import RandomSource, create_random_source
from .sha256 import sha256_hex
from .utils import bytes_to_hex, hex_to_bytes


# ------------------------------------------------------------------
# File naming
# ------------------------------------------------------------------

def has_extension(path: str | Path, extension: str = ".enc") -> bool:
    name = str(path)
    return len(name) > len(extension) and name.endswith(extension)


def add_extension(path: str | Path, extension: str = ".enc") -> str:
    return str(path) + extension


def remove_extension(path: str | Path, extension: str = ".enc") -> str:
    name = str(path)
    if has_extension(name, extension):
        return name[: -len(extension)]
    return name


def hash_file(path: str | Path) -> str | None:
    """SHA-256 hex digest of a file, or None if it cannot be read."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return None
    return sha256_hex(data)


class Vault:
    """
    Password-bound front end over the CBC codec.

    One Vault corresponds to one password entry: the key is derived and
    expanded once and reused for every text, file or batch operation.
    To change the password, build a new Vault.
    """

    def __init__(
        self,
        password: str | bytes,
        config: VaultConfig | None = None,
        random_source: RandomSource | None = None,
    ):
        self.config = config or VaultConfig()
        if random_source is None:
            random_source = create_random_source(self.config.random_source)
        self.codec = CbcCodec(Aes256Cipher.from_password(password), random_source)

    # ---- buffers ----

    def encrypt_bytes(self, data: bytes) -> CodecResult:
        return self.codec.encrypt(data)

    def decrypt_bytes(self, data: bytes) -> CodecResult:
        return self.codec.decrypt(data)

    # ---- text mode ----

    def encrypt_text(self, text: str) -> CodecResult:
        """Encrypt UTF-8 text; on success ``data`` holds the ASCII hex.

        Escaped argv bytes (U+DC80..U+DCFF) are encrypted as the raw bytes
        they stand for. Any other lone surrogate is INVALID_ENCODING.
        """
        try:
            plaintext = text.encode("utf-8", errors="surrogateescape")
        except UnicodeEncodeError:
            return CodecResult.fail(Failure.INVALID_ENCODING)
        result = self.codec.encrypt(plaintext)
        if not result.ok:
            return result
        return CodecResult.success(bytes_to_hex(result.data).encode("ascii"))

    def decrypt_text(self, hex_ciphertext: str) -> CodecResult:
        """Decrypt hex ciphertext; on success ``data`` holds the plaintext bytes."""
        try:
            data = hex_to_bytes(hex_ciphertext)
        except ValueError:
            return CodecResult.fail(Failure.INVALID_ENCODING)
        return self.codec.decrypt(data)

    # ---- file mode ----

    def default_encrypted_name(self, source: str | Path) -> str:
        return add_extension(source, self.config.encrypted_extension)

    def default_decrypted_name(self, source: str | Path, batch: bool = False) -> str:
        """Strip the extension, else fall back to a prefixed or fixed name."""
        ext = self.config.encrypted_extension
        if has_extension(source, ext):
            return remove_extension(source, ext)
        if batch:
            path = Path(source)
            return str(path.with_name(self.config.decrypted_prefix + path.name))
        return self.config.fallback_decrypted_name

    def encrypt_file(self, source: str | Path, destination: str | Path | None = None) -> FileOutcome:
        """Encrypt ``source`` into ``destination`` (default: ``source`` + extension)."""
        destination = destination or self.default_encrypted_name(source)
        return self._process_file(source, destination, self.codec.encrypt)

    def decrypt_file(self, source: str | Path, destination: str | Path | None = None) -> FileOutcome:
        """Decrypt ``source`` into ``destination`` (default: extension stripped)."""
        destination = destination or self.default_decrypted_name(source)
        return self._process_file(source, destination, self.codec.decrypt)

    def _process_file(self, source, destination, operation) -> FileOutcome:
        outcome = FileOutcome(source=str(source), destination=str(destination), ok=False)
        start = time.perf_counter()

        try:
            data = Path(source).read_bytes()
        except OSError as e:
            outcome.error_detail = f"Cannot open '{source}': {e.strerror or e}"
            return outcome

        result = operation(data)
        if not result.ok:
            outcome.failure = result.failure
            outcome.error_detail = result.failure.description
            return outcome

        dest = Path(destination)
        if dest.exists() and not self.config.overwrite:
            outcome.error_detail = f"Refusing to overwrite '{destination}'"
            return outcome
        try:
            dest.write_bytes(result.data)
        except OSError as e:
            outcome.error_detail = f"Cannot create '{destination}': {e.strerror or e}"
            return outcome

        outcome.ok = True
        outcome.size_bytes = len(result.data)
        outcome.elapsed_s = time.perf_counter() - start
        return outcome

    # ---- batch mode ----

    def batch_encrypt(self, sources: Iterable[str | Path]) -> list[FileOutcome]:
        """Encrypt each file next to itself; one failure does not stop the rest."""
        return [self._batch_one(src, self.encrypt_file, self.default_encrypted_name(src))
                for src in sources]

    def batch_decrypt(self, sources: Iterable[str | Path]) -> list[FileOutcome]:
        return [self._batch_one(src, self.decrypt_file, self.default_decrypted_name(src, batch=True))
                for src in sources]

    def _batch_one(self, source, operation, destination) -> FileOutcome:
        if not Path(source).is_file():
            return FileOutcome(
                source=str(source),
                destination=str(destination),
                ok=False,
                error_detail="not found",
            )
        return operation(source, destination)
