from __future__ import annotations

import random
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Optional


class RandomSequenceExhausted(RuntimeError):
    pass


class RandomSource(ABC):
    """Single entry point for every random draw made by the engine."""

    @abstractmethod
    def _draw_int(self, min_inclusive: int, max_exclusive: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def uniform_float01(self) -> float:
        raise NotImplementedError

    def uniform_int(self, first: int, second: Optional[int] = None) -> int:
        """``uniform_int(max)`` draws from [0, max); ``uniform_int(min, max)`` from [min, max)."""
        if second is None:
            low, high = 0, int(first)
        else:
            low, high = int(first), int(second)
        if high <= low:
            raise ValueError(f"Empty integer range [{low}, {high})")
        return self._draw_int(low, high)

    def chance(self, probability: float) -> bool:
        return self.uniform_float01() < float(probability)

    def dice_sum(self, sides: int, count: int = 1) -> int:
        if int(sides) < 1:
            raise ValueError("Dice need at least one side")
        return sum(self.uniform_int(1, int(sides) + 1) for _ in range(max(0, int(count))))

    def pick(self, options):
        if not options:
            raise ValueError("Cannot pick from an empty sequence")
        return options[self.uniform_int(len(options))]


class SeededRandomSource(RandomSource):
    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def _draw_int(self, min_inclusive: int, max_exclusive: int) -> int:
        with self._lock:
            return self._rng.randrange(min_inclusive, max_exclusive)

    def uniform_float01(self) -> float:
        with self._lock:
            return self._rng.random()


class ReplayRandomSource(RandomSource):
    """Replays recorded integer and float draws in order.

    Integer and float draws come from separate queues. A queued integer outside the requested
    range is rejected so a stale recording fails loudly instead of drifting.
    """

    def __init__(
        self,
        ints: Iterable[int] = (),
        floats: Iterable[float] = (),
        *,
        default_float: Optional[float] = None,
        default_int: Optional[int] = None,
    ) -> None:
        self._ints = deque(int(value) for value in ints)
        self._floats = deque(float(value) for value in floats)
        self._default_float = default_float
        self._default_int = default_int
        self.history: list[tuple[str, int | float]] = []
        self._lock = threading.Lock()

    def _draw_int(self, min_inclusive: int, max_exclusive: int) -> int:
        with self._lock:
            if self._ints:
                value = self._ints.popleft()
            elif self._default_int is not None:
                value = max(min_inclusive, min(max_exclusive - 1, self._default_int))
            else:
                raise RandomSequenceExhausted(f"No integer draw left for [{min_inclusive}, {max_exclusive})")
            if not min_inclusive <= value < max_exclusive:
                raise ValueError(f"Replayed integer {value} outside [{min_inclusive}, {max_exclusive})")
            self.history.append(("int", value))
            return value

    def uniform_float01(self) -> float:
        with self._lock:
            if self._floats:
                value = self._floats.popleft()
            elif self._default_float is not None:
                value = self._default_float
            else:
                raise RandomSequenceExhausted("No float draw left")
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Replayed float {value} outside [0, 1)")
            self.history.append(("float", value))
            return value

    @property
    def remaining(self) -> tuple[int, int]:
        return len(self._ints), len(self._floats)
