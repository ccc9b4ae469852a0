"""
Sequence Generator: Fibonacci sweep of embedded-array sizes.
"""
from typing import List, Tuple

from arraybench.errors import ConfigError

DEFAULT_SEED: Tuple[int, int] = (1, 2)


def generate_sweep(ceiling: int, seed: Tuple[int, int] = DEFAULT_SEED) -> List[int]:
    """Generate the array sizes to test, in sweep order.

    Starts from the two seed values and appends the sum of the last two
    while it does not exceed ``ceiling``. Seeds above the ceiling are dropped.

    >>> generate_sweep(10)
    [1, 2, 3, 5, 8]
    >>> generate_sweep(10, seed=(0, 1))
    [0, 1, 1, 2, 3, 5, 8]
    """
    first, second = seed
    if first < 0 or second < first:
        raise ConfigError(
            "Invalid sweep seed",
            details="Seed values must satisfy 0 <= a <= b",
            parameter="seed_pair",
            received=seed,
        )
    if second == 0:
        raise ConfigError(
            "Invalid sweep seed",
            details="A (0, 0) seed never grows",
            parameter="seed_pair",
            received=seed,
        )

    sequence = [value for value in (first, second) if value <= ceiling]
    if len(sequence) < 2:
        return sequence

    while True:
        following = sequence[-1] + sequence[-2]
        if following > ceiling:
            break
        sequence.append(following)
    return sequence
