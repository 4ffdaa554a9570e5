"""
Tag filtering and read-only aggregates over a card list.

Pure computation, no I/O.
"""

import math
from collections.abc import Sequence

from flashdeck.domain.constants import AVERAGE_SCORE_CAP
from flashdeck.domain.models import Card, CardListing


def matches_tag(card: Card, tag: str) -> bool:
    """An empty tag matches every card."""
    return tag == "" or tag in card.tags


def average_score(cards: Sequence[Card], tag: str = "") -> float:
    """
    Mean of min(5, score) over the cards matching tag.

    The cap applies to the aggregate only; stored scores are untouched.

    Returns:
        The mean, or NaN when no card matches.
    """
    total = 0
    count = 0
    for card in cards:
        if matches_tag(card, tag):
            total += min(AVERAGE_SCORE_CAP, card.score)
            count += 1
    if count == 0:
        return math.nan
    return total / count


def format_average(value: float) -> str:
    if math.isnan(value):
        return "n/a"
    return f"{value:.2f}"


def all_tags(cards: Sequence[Card]) -> list[str]:
    """Distinct tags in first-seen order."""
    seen: dict[str, None] = {}
    for card in cards:
        for tag in card.tags:
            seen.setdefault(tag, None)
    return list(seen)


def list_cards(cards: Sequence[Card], tag: str = "") -> list[CardListing]:
    return [
        CardListing(index=i, front=card.front, back=card.back, score=card.score)
        for i, card in enumerate(cards)
        if matches_tag(card, tag)
    ]
