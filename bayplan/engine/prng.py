"""Seeded PCG32 generator for collision tie-breaks.

When two circles share a center there is no meaningful push direction, so
the collision resolver asks this generator for one. Seeding it keeps the
layout reproducible: the same sequence of edits always ends in the same
positions.

Implements the PCG-XSH-RR variant (32-bit output, 64-bit state).
Reference: https://www.pcg-random.org/
"""

from __future__ import annotations

import math

DEFAULT_SEED = 0x7157E


class PCG32:
    _MASK32 = 0xFFFFFFFF
    _MASK64 = 0xFFFFFFFFFFFFFFFF
    _MUL = 6364136223846793005

    def __init__(self, seed: int = DEFAULT_SEED, seq: int = 0) -> None:
        self._state: int = 0
        self._inc: int = ((seq << 1) | 1) & self._MASK64
        self._step()
        self._state = (self._state + seed) & self._MASK64
        self._step()

    def _step(self) -> None:
        self._state = (self._state * self._MUL + self._inc) & self._MASK64

    def next_u32(self) -> int:
        old = self._state
        self._step()
        xorshifted = (((old >> 18) ^ old) >> 27) & self._MASK32
        rot = (old >> 59) & 31
        return (
            (xorshifted >> rot) | (xorshifted << ((-rot) & 31))
        ) & self._MASK32

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        return self.next_u32() / (self._MASK32 + 1)

    def next_unit_vector(self) -> tuple[float, float]:
        """Direction with a uniformly drawn angle; always length 1."""
        angle = self.next_float() * 2.0 * math.pi
        return math.cos(angle), math.sin(angle)
