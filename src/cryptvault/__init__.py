"""Crypt Vault: AES-256-CBC encryption with SHA-256 password keys."""

__version__ = "0.1.0"

from .cipher import Aes256Cipher
from .cbc import CbcCodec, encrypt, decrypt
from .config import VaultConfig
from .interfaces import CodecResult, Failure, VaultError
from .kdf import derive_key
from .randomness import RandomSource, create_random_source
from .sha256 import sha256, sha256_hex
from .vault import Vault

__all__ = [
    "Aes256Cipher",
    "CbcCodec",
    "encrypt",
    "decrypt",
    "VaultConfig",
    "CodecResult",
    "Failure",
    "VaultError",
    "derive_key",
    "RandomSource",
    "create_random_source",
    "sha256",
    "sha256_hex",
    "Vault",
]
