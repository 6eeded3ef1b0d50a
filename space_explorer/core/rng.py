from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
ZERO_SEED_FALLBACK = 0x9E3779B9
ZERO_STATE_FALLBACK = 0x6D2B79F5


def seed_to_uint32(seed: int | str) -> int:
    """Hash any int or string seed to a non-zero 32-bit xorshift state."""
    value = int(hashlib.sha256(str(seed).encode("utf-8")).hexdigest()[:8], 16)
    return value or ZERO_SEED_FALLBACK


@dataclass(slots=True)
class DeterministicRNG:
    """xorshift32 stream shared by wave spawns, enemy fire rolls and planet loot.

    ``calls`` counts draws so two sessions can be compared for identical
    consumption, not only identical output.
    """

    seed: int | str
    state: int
    calls: int = 0

    @classmethod
    def from_seed(cls, seed: int | str) -> "DeterministicRNG":
        return cls(seed=seed, state=seed_to_uint32(seed))

    def fork(self, label: str) -> "DeterministicRNG":
        """Independent stream derived from this seed; does not advance ``self``."""
        return DeterministicRNG.from_seed(f"{self.seed}:{label}")

    def _advance(self) -> int:
        x = self.state & UINT32_MASK
        x ^= (x << 13) & UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & UINT32_MASK
        self.state = x or ZERO_STATE_FALLBACK
        self.calls += 1
        return self.state

    def next_float(self) -> float:
        return self._advance() / 2**32

    def next_int(self, min_inclusive: int, max_exclusive: int) -> int:
        if max_exclusive <= min_inclusive:
            raise ValueError(f"Empty integer range [{min_inclusive}, {max_exclusive}).")
        return min_inclusive + int(self.next_float() * (max_exclusive - min_inclusive))

    def next_uniform(self, low: float, high: float) -> float:
        return low + self.next_float() * (high - low)

    def choose(self, values: Sequence[T]) -> T:
        if not values:
            raise ValueError("Cannot choose from an empty sequence.")
        return values[self.next_int(0, len(values))]
