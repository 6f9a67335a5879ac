"""Failure kinds and result values shared by the codec and the vault layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Failure(str, Enum):
    """Why a codec operation did not produce output.

    The caller only learns the kind; turning it into a user-facing
    message is the application layer's job.
    """

    RANDOM_GENERATION = "random_generation"
    INVALID_CIPHERTEXT_LENGTH = "invalid_ciphertext_length"
    INVALID_PADDING = "invalid_padding"
    INVALID_ENCODING = "invalid_encoding"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Failure.RANDOM_GENERATION: "could not generate a random IV",
    Failure.INVALID_CIPHERTEXT_LENGTH: "ciphertext length is not IV plus whole blocks",
    Failure.INVALID_PADDING: "padding check failed (wrong password or corrupt data)",
    Failure.INVALID_ENCODING: "input is not valid hex or not encodable text",
}


class VaultError(Exception):
    """Raised by CodecResult.unwrap() for callers that want exceptions."""

    def __init__(self, failure: Failure):
        super().__init__(failure.description)
        self.failure = failure


@dataclass(frozen=True)
class CodecResult:
    """Outcome of an encrypt or decrypt call.

    On failure ``data`` is empty. A real ciphertext is never shorter than
    32 bytes, so an empty ciphertext is never a legitimate output.
    """

    data: bytes = b""
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, data: bytes) -> CodecResult:
        return cls(data=data)

    @classmethod
    def fail(cls, failure: Failure) -> CodecResult:
        return cls(data=b"", failure=failure)

    @property
    def text(self) -> str:
        """Data decoded as UTF-8, undecodable bytes replaced."""
        return self.data.decode("utf-8", errors="replace")

    def unwrap(self) -> bytes:
        """Return the data or raise VaultError."""
        if self.failure is not None:
            raise VaultError(self.failure)
        return self.data


@dataclass
class FileOutcome:
    """Result of a single file operation in the vault layer."""

    source: str
    destination: str
    ok: bool
    failure: Failure | None = None
    error_detail: str = ""
    elapsed_s: float = 0.0
    size_bytes: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert outcome to dictionary for serialization."""
        return {
            "source": self.source,
            "destination": self.destination,
            "ok": self.ok,
            "failure": self.failure.value if self.failure else None,
            "error_detail": self.error_detail,
            "elapsed_s": self.elapsed_s,
            "size_bytes": self.size_bytes,
        }
