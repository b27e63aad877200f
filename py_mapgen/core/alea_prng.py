"""
Alea pseudo-random stream used for site sampling.

Based on Johannes Baagøe's Alea algorithm. The generator is an explicit
value owned by the caller; nothing in the package keeps a global stream.
"""

from typing import Iterable, Tuple, Union

Seed = Union[int, str, Iterable]

_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Alea's string hash, used only while seeding."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        n = self.n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * _TWO_POW_32
        self.n = n
        return _uint32(n) * _TWO_POW_NEG_32


class AleaPRNG:
    """Seeded uniform stream in [0, 1)."""

    def __init__(self, seed: Seed = 0):
        self.reseed(seed)

    def reseed(self, seed: Seed) -> None:
        """Reset the stream so that it replays from ``seed``."""
        self.seed = seed
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def random_pair(self) -> Tuple[float, float]:
        """Two consecutive independent draws."""
        first = self.random()
        return first, self.random()
