from typing import Callable

from .digest import MASK32, imul

INCREMENT = 0x6D2B79F5


def make_stream(seed: int) -> Callable[[], float]:
    """
    Mulberry32 generator. Each call returns the next float in [0, 1).
    The same seed always replays the same sequence.
    """
    state = int(seed) & MASK32

    def next_value() -> float:
        nonlocal state
        state = (state + INCREMENT) & MASK32
        t = state
        t = imul(t ^ (t >> 15), t | 1)
        t ^= (t + imul(t ^ (t >> 7), t | 61)) & MASK32
        return (t ^ (t >> 14)) / 4294967296

    return next_value
