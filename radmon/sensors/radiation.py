from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_OFFSET = 16.0
DEFAULT_SPAN = 6.0


@dataclass
class RadiationSensor:
    """
    Default random measurement source.

    Behavior
    --------
    Each reading is ``offset + span * u1 * u2`` with ``u1`` and ``u2`` drawn
    independently and uniformly from ``[0, 1)``. With the defaults the readings
    fall in ``[16, 22)``, skewed towards the low end.

    The generator is created once per sensor and reused for every reading.

    Parameters
    ----------
    offset
        Value added to every sample.
    span
        Width of the sampled range above ``offset``.
    seed
        RNG seed for reproducible runs. None seeds from OS entropy.
    """

    offset: float = DEFAULT_OFFSET
    span: float = DEFAULT_SPAN
    seed: Optional[int] = None

    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def next_measure(self) -> float:
        return float(self.offset) + self._sample()

    def _sample(self) -> float:
        return float(self.span) * self._rng.random() * self._rng.random()
