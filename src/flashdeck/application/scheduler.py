"""
Weighted random card selection.

Roulette-wheel sampling over the cards matching the active tag: each candidate
is chosen with probability weight(score) / total_weight. Stateless; the caller
owns the selection and decides what to show.
"""

import logging
import random
from collections.abc import Sequence

from flashdeck.domain.models import Card

from .aggregate import matches_tag
from .weighting import WeightFunction

logger = logging.getLogger(__name__)


def filtered_indices(cards: Sequence[Card], tag: str = "") -> list[int]:
    """Indices of the cards matching tag, in collection order."""
    return [i for i, card in enumerate(cards) if matches_tag(card, tag)]


def pick(candidates: Sequence[int], weights: Sequence[float], r: float) -> int:
    """
    Walk candidates left to right, subtracting each weight from r.

    The first candidate where the remainder reaches <= 0 wins, so on an exact
    boundary the earlier candidate is chosen. A tiny positive remainder left by
    float rounding falls through to the last candidate.
    """
    for index, weight in zip(candidates, weights):
        r -= weight
        if r <= 0:
            return index
    return candidates[-1]


def select_next(
    cards: Sequence[Card],
    tag: str,
    weight: WeightFunction,
    rng: random.Random | None = None,
) -> int | None:
    """
    Draw the next card index.

    Args:
        cards: The full collection.
        tag: Active tag filter, "" for none.
        weight: Maps a score to a positive sampling weight.
        rng: Random source; the module-level generator if not given.

    Returns:
        The chosen index, or None if no card matches the filter.
    """
    candidates = filtered_indices(cards, tag)
    if not candidates:
        logger.debug(f"No cards match tag '{tag}'")
        return None

    weights = [weight(cards[i].score) for i in candidates]
    total = sum(weights)
    r = (rng or random).random() * total
    return pick(candidates, weights, r)
