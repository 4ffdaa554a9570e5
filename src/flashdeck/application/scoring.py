"""
Score updates after an answer.

Correct adds one; incorrect divides by four, rounding down, so a score can
never go negative. The mutated collection is saved before returning, and a
failed save propagates so the caller never moves on to the next card with
an unsaved score.
"""

import logging

from flashdeck.domain.constants import INCORRECT_DIVISOR
from flashdeck.domain.models import Card

from .collection import CardCollection
from .repository import CardRepository

logger = logging.getLogger(__name__)


def apply_correct(card: Card) -> int:
    card.score += 1
    return card.score


def apply_incorrect(card: Card) -> int:
    card.score //= INCORRECT_DIVISOR
    return card.score


async def mark_card(
    collection: CardCollection, index: int, repository: CardRepository, correct: bool
) -> int:
    """
    Apply an answer to the card at index and persist the collection.

    Returns:
        The card's new score.

    Raises:
        IndexError: No card at index.
        StorageError: The save failed; the in-memory score is already changed.
    """
    card = collection[index]
    old = card.score
    new = apply_correct(card) if correct else apply_incorrect(card)
    logger.debug(f"Card {index} '{card.front}': {old} -> {new}")
    await repository.save(collection)
    return new


async def mark_correct(collection: CardCollection, index: int, repository: CardRepository) -> int:
    return await mark_card(collection, index, repository, correct=True)


async def mark_incorrect(
    collection: CardCollection, index: int, repository: CardRepository
) -> int:
    return await mark_card(collection, index, repository, correct=False)
