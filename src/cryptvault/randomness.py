"""Random byte sources for IV generation.

Every source answers ``get_bytes(count)`` with exactly ``count`` bytes or
``None`` when it cannot deliver; the codec turns ``None`` into a
RANDOM_GENERATION failure. Which source to use is decided once, through
``create_random_source``, never at the call site.
"""

from __future__ import annotations

import secrets
from abc import ABC, abstractmethod
from typing import Any

DEFAULT_DEVICE = "/dev/urandom"


class RandomSource(ABC):
    """Base class for IV sources, with usage accounting."""

    name: str = "base"

    def __init__(self) -> None:
        self._bytes_used = 0
        self._failures = 0

    @abstractmethod
    def _read(self, count: int) -> bytes | None:
        """Produce ``count`` bytes, or None if unavailable."""
        raise NotImplementedError

    def get_bytes(self, count: int) -> bytes | None:
        """Get random bytes and track usage.

        Args:
            count: Number of bytes to generate

        Returns:
            ``count`` random bytes, or None if the source failed
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        data = self._read(count)
        if data is None or len(data) != count:
            self._failures += 1
            return None

        self._bytes_used += count
        return data

    def reset(self) -> None:
        """Reset usage counters."""
        self._bytes_used = 0
        self._failures = 0

    @property
    def total_bytes(self) -> int:
        """Total random bytes handed out."""
        return self._bytes_used

    @property
    def failures(self) -> int:
        return self._failures

    def get_summary(self) -> dict[str, Any]:
        """Get summary of randomness usage."""
        return {
            "source": self.name,
            "total_bytes": self._bytes_used,
            "failures": self._failures,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class SystemRandomSource(RandomSource):
    """Operating system CSPRNG via ``secrets``."""

    name = "system"

    def _read(self, count: int) -> bytes | None:
        try:
            return secrets.token_bytes(count)
        except OSError:
            return None


class DevUrandomSource(RandomSource):
    """Reads a kernel random device (``/dev/urandom`` by default).

    A missing device or a short read is reported as unavailable.
    """

    name = "urandom"

    def __init__(self, path: str = DEFAULT_DEVICE) -> None:
        super().__init__()
        self.path = path

    def _read(self, count: int) -> bytes | None:
        try:
            with open(self.path, "rb") as f:
                data = f.read(count)
        except OSError:
            return None
        if len(data) != count:
            return None
        return data


class SeededRandomSource(RandomSource):
    """Deterministic source for tests and reproducible traces.

    Uses a linear congruential generator (LCG).
    NOT cryptographically secure - never use it for real encryption.
    """

    name = "seeded"

    def __init__(self, seed: int = 0) -> None:
        super().__init__()
        self._seed = seed
        self._rng = _SeededRNG(seed)

    def _read(self, count: int) -> bytes | None:
        return self._rng.get_bytes(count)

    def reset(self) -> None:
        super().reset()
        self._rng = _SeededRNG(self._seed)

    def get_summary(self) -> dict[str, Any]:
        summary = super().get_summary()
        summary["seed"] = self._seed
        return summary


class UnavailableRandomSource(RandomSource):
    """Always fails. Models a platform with no usable entropy source."""

    name = "unavailable"

    def _read(self, count: int) -> bytes | None:
        return None


class _SeededRNG:
    """Simple seeded PRNG for reproducibility."""

    def __init__(self, seed: int):
        self._state = seed & 0xFFFFFFFFFFFFFFFF
        self._a = 6364136223846793005
        self._c = 1442695040888963407
        self._m = 2**64

    def _next(self) -> int:
        self._state = (self._a * self._state + self._c) % self._m
        return self._state

    def get_bytes(self, count: int) -> bytes:
        result = bytearray(count)
        for i in range(count):
            # high byte: the low bits of an LCG have short periods
            result[i] = (self._next() >> 56) & 0xFF
        return bytes(result)


RANDOM_SOURCES: dict[str, type] = {
    "system": SystemRandomSource,
    "urandom": DevUrandomSource,
    "seeded": SeededRandomSource,
}


def create_random_source(name: str = "auto", **kwargs: Any) -> RandomSource:
    """Create a random source by name.

    Args:
        name: "auto", "system", "urandom" or "seeded"
        **kwargs: Passed to the source constructor (``path``, ``seed``)

    Returns:
        A fresh RandomSource

    Raises:
        KeyError: If the name is unknown
    """
    if name == "auto":
        # secrets is backed by the platform CSPRNG on every OS we run on
        name = "system"
    if name not in RANDOM_SOURCES:
        available = ", ".join(["auto", *RANDOM_SOURCES])
        raise KeyError(f"Unknown random source '{name}'. Available: {available}")
    return RANDOM_SOURCES[name](**kwargs)
