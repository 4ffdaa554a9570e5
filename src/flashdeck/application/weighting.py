"""
Sampling weights for card selection.

Every policy maps a non-negative score to a strictly positive weight and is
strictly decreasing, so weak cards come up more often but no card ever drops
out of the draw.
"""

import sys
from collections.abc import Callable
from enum import Enum

from flashdeck.domain.constants import EXPONENTIAL_BASE

WeightFunction = Callable[[int], float]


class WeightPolicy(str, Enum):
    EXPONENTIAL = "exponential"
    HARMONIC = "harmonic"


def exponential_decay(score: int, base: float = EXPONENTIAL_BASE) -> float:
    """base^(-score), floored at the smallest positive float."""
    return max(base ** (-score), sys.float_info.min)


def harmonic_decay(score: int) -> float:
    """1 / (score + 1)."""
    return 1.0 / (score + 1)


_POLICIES: dict[WeightPolicy, WeightFunction] = {
    WeightPolicy.EXPONENTIAL: exponential_decay,
    WeightPolicy.HARMONIC: harmonic_decay,
}


def get_weight_function(policy: WeightPolicy | str) -> WeightFunction:
    """
    Look up the weight function for a policy name.

    Raises:
        ValueError: Unknown policy.
    """
    return _POLICIES[WeightPolicy(policy)]
