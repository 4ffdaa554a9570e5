"""
Domain models for flashdeck.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum


def normalize_tags(tags: list[str]) -> list[str]:
    """
    Canonicalize a tag list.

    Each tag is stripped of surrounding whitespace, and the legacy encoding of
    "no tags" (a single empty string) becomes the empty list. Duplicates are kept.
    """
    cleaned = [tag.strip() for tag in tags]
    if len(cleaned) == 1 and cleaned[0] == "":
        return []
    return cleaned


@dataclass
class Card:
    """
    A single flashcard.

    Attributes:
        front: Text shown on the front face.
        back: Text shown on the back face.
        tags: Ordered tag list (semantically a set, duplicates not removed).
        score: Proficiency score, never negative.
    """

    front: str
    back: str
    tags: list[str] = field(default_factory=list)
    score: int = 0

    def __post_init__(self):
        if self.score < 0:
            raise ValueError(f"Card score must be non-negative, got {self.score}")
        self.tags = normalize_tags(self.tags)


class RegionState(str, Enum):
    """Settled visibility of a view region."""

    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass(frozen=True)
class EditForm:
    """Pre-filled add-form contents produced when a card is taken out for editing."""

    front: str
    back: str
    tags_text: str


@dataclass(frozen=True)
class CardListing:
    """One row of the card list: the card's current index plus its display fields."""

    index: int
    front: str
    back: str
    score: int
