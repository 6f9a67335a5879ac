"""Configuration for the vault application layer."""

from __future__ import annotations

from dataclasses import dataclass

from .randomness import RANDOM_SOURCES


@dataclass
class VaultConfig:
    """Configuration object for file and text operations.

    Passed to the Vault and built by the CLI from its options.
    """

    # Suffix added to encrypted files and stripped on decryption
    encrypted_extension: str = ".enc"

    # Prefix for batch-decrypted files that lack the extension
    decrypted_prefix: str = "decrypted_"

    # Output name for single-file decryption when the input lacks the extension
    fallback_decrypted_name: str = "decrypted.txt"

    # IV source: "auto", "system", "urandom" or "seeded"
    random_source: str = "auto"

    # Replace existing output files
    overwrite: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.encrypted_extension.startswith(".") or len(self.encrypted_extension) < 2:
            raise ValueError(
                f"encrypted_extension must look like '.ext', got {self.encrypted_extension!r}"
            )
        if not self.decrypted_prefix:
            raise ValueError("decrypted_prefix must not be empty")
        if not self.fallback_decrypted_name:
            raise ValueError("fallback_decrypted_name must not be empty")
        if self.random_source != "auto" and self.random_source not in RANDOM_SOURCES:
            raise ValueError(f"Unknown random_source: {self.random_source}")
