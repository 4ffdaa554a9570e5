"""
In-memory card collection.

Cards are addressed by position only. Removing or inserting a card shifts the
index of every card after it, so callers must re-select after any mutation.
"""

import logging
from collections.abc import Iterator

from flashdeck.domain.models import Card, EditForm, normalize_tags

logger = logging.getLogger(__name__)


def parse_tags(text: str) -> list[str]:
    """Split comma-separated form input into a normalized tag list."""
    return normalize_tags(text.split(","))


class CardCollection:
    """Ordered, index-addressable sequence of cards with its mutation rules."""

    def __init__(self, cards: list[Card] | None = None):
        self._cards: list[Card] = []
        for card in cards or []:
            card.tags = normalize_tags(card.tags)
            self._cards.append(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __getitem__(self, index: int) -> Card:
        return self._cards[index]

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards(self) -> list[Card]:
        return self._cards

    def add(self, card: Card) -> int:
        """Normalize the card's tags, append it and return its index."""
        card.tags = normalize_tags(card.tags)
        self._cards.append(card)
        logger.debug(f"Added card '{card.front}' at {len(self._cards) - 1}")
        return len(self._cards) - 1

    def add_or_replace_by_front(self, card: Card) -> int:
        """
        Append the card after removing every existing card with the same front.

        Returns:
            The index of the appended card.
        """
        before = len(self._cards)
        self._cards = [c for c in self._cards if c.front != card.front]
        replaced = before - len(self._cards)
        if replaced:
            logger.info(f"Replacing {replaced} card(s) with front '{card.front}'")
        return self.add(card)

    def remove_at(self, index: int) -> Card:
        """
        Remove and return the card at index.

        Raises:
            IndexError: index is out of range (negative indices are rejected too).
        """
        if not 0 <= index < len(self._cards):
            raise IndexError(f"Card index {index} out of range (size {len(self._cards)})")
        return self._cards.pop(index)

    def edit_at(self, index: int) -> EditForm:
        """
        Take the card at index out of the collection for editing.

        The card is removed immediately. Re-adding it is the caller's job, so an
        abandoned edit leaves the card deleted.
        """
        card = self.remove_at(index)
        return EditForm(front=card.front, back=card.back, tags_text=",".join(card.tags))
