"""
Review session: the orchestrator around the core components.

Owns the collection, the tag filter and the current selection for one running
instance, and sequences every operation so that:

- operations that show or change cards run one at a time,
- score changes and membership changes are saved before the next draw,
- a card is only revealed after the previous transitions have settled,
- mutations wait for in-flight transitions on the card faces.
"""

import asyncio
import logging
import random

from flashdeck.domain.constants import (
    ADD_SCREEN,
    CARD_BACK,
    CARD_FRONT,
    CARD_SCREEN,
    EMPTY_SCREEN,
    LIST_SCREEN,
    WAITING_SCREEN,
)
from flashdeck.domain.errors import NoCardSelectedError
from flashdeck.domain.models import Card, CardListing, EditForm

from . import scoring
from .aggregate import all_tags, average_score, format_average, list_cards
from .collection import CardCollection, parse_tags
from .repository import CardRepository
from .scheduler import select_next
from .transitions import TransitionEngine
from .weighting import WeightFunction, exponential_decay

logger = logging.getLogger(__name__)


def render_face(text: str, score: int) -> str:
    return f"{text}\nScore: {score}"


class ReviewSession:
    """
    One user's review session over a single card collection.

    Args:
        repository: Load/save access to the stored collection.
        engine: Transition engine over the session's viewport.
        weight: Score-to-weight policy for the scheduler.
        tag: Initial tag filter, "" for none.
        rng: Random source for card draws and the face shown first.
    """

    def __init__(
        self,
        repository: CardRepository,
        engine: TransitionEngine,
        weight: WeightFunction = exponential_decay,
        tag: str = "",
        rng: random.Random | None = None,
    ):
        self.repository = repository
        self.engine = engine
        self.weight = weight
        self.tag = tag
        self.rng = rng or random.Random()
        self.collection = CardCollection()
        self.current_index: int | None = None
        self._lock = asyncio.Lock()

    @property
    def view(self):
        return self.engine.view

    @property
    def current_card(self) -> Card | None:
        if self.current_index is None:
            return None
        return self.collection[self.current_index]

    def _require_current(self) -> int:
        if self.current_index is None:
            raise NoCardSelectedError("No card is selected")
        return self.current_index

    async def start(self) -> int | None:
        """Load the stored collection and show the first card."""
        async with self._lock:
            self.collection = await self.repository.load()
            logger.info(f"Session started: {len(self.collection)} cards, tag='{self.tag}'")
            return await self._next_card()

    async def set_tag(self, tag: str) -> int | None:
        async with self._lock:
            self.tag = tag.strip()
            return await self._next_card()

    async def next_card(self) -> int | None:
        """
        Draw and show the next card.

        Returns:
            The shown index, or None when no card matches the filter, in which
            case the empty screen is shown instead.
        """
        async with self._lock:
            return await self._next_card()

    async def show_card(self, index: int) -> None:
        """Hide both faces, switch to the card screen, then reveal a random face."""
        async with self._lock:
            await self._show_card(index)

    async def flip(self) -> None:
        async with self._lock:
            self._require_current()
            await self.engine.flip(CARD_FRONT, CARD_BACK)

    async def mark_correct(self) -> int:
        async with self._lock:
            return await self._mark(correct=True)

    async def mark_incorrect(self) -> int:
        async with self._lock:
            return await self._mark(correct=False)

    async def add_card(self, front: str, back: str, tags_text: str = "", replace: bool = False) -> int:
        """
        Add a card from form input, save, and draw the next card.

        Args:
            replace: Drop existing cards with the same front first.

        Returns:
            The new card's index.
        """
        card = Card(front=front, back=back, tags=parse_tags(tags_text))
        async with self._lock:
            await self.engine.settle()
            if replace:
                index = self.collection.add_or_replace_by_front(card)
            else:
                index = self.collection.add(card)
            self.current_index = None

            self.view.set_content(WAITING_SCREEN, "Saving...")
            await self.engine.switch_screen(WAITING_SCREEN)
            await self.repository.save(self.collection)
            await self._next_card()
            return index

    async def remove_current(self) -> Card:
        async with self._lock:
            index = self._require_current()
            await self.engine.settle(CARD_FRONT, CARD_BACK)
            card = self.collection.remove_at(index)
            self.current_index = None
            logger.info(f"Removed card '{card.front}'")
            await self.repository.save(self.collection)
            await self._next_card()
            return card

    async def edit_current(self) -> EditForm:
        """
        Take the current card out for editing and open the add screen.

        The card is removed and the removal saved right away; it only comes
        back if the returned form is submitted through add_card.
        """
        async with self._lock:
            index = self._require_current()
            await self.engine.settle(CARD_FRONT, CARD_BACK)
            form = self.collection.edit_at(index)
            self.current_index = None
            await self.repository.save(self.collection)
            self.view.set_content(ADD_SCREEN, f"{form.front}\n{form.back}\n{form.tags_text}")
            await self.engine.switch_screen(ADD_SCREEN)
            return form

    async def show_list(self) -> list[CardListing]:
        async with self._lock:
            rows = self.listing()
            lines = [f"[{r.index}] {r.front} ⇄ {r.back}  ({r.score})" for r in rows]
            self.view.set_content(LIST_SCREEN, "\n".join(lines))
            await self.engine.switch_screen(LIST_SCREEN)
            return rows

    async def aclose(self) -> None:
        await self.repository.gateway.aclose()

    def average(self) -> float:
        return average_score(self.collection, self.tag)

    def average_text(self) -> str:
        return format_average(self.average())

    def listing(self) -> list[CardListing]:
        return list_cards(self.collection, self.tag)

    def tags(self) -> list[str]:
        return all_tags(self.collection)

    # Helpers below expect the caller to hold self._lock.

    async def _next_card(self) -> int | None:
        index = select_next(self.collection, self.tag, self.weight, self.rng)
        if index is None:
            self.current_index = None
            message = f"No cards tagged '{self.tag}'." if self.tag else "No cards yet."
            self.view.set_content(EMPTY_SCREEN, message)
            await self.engine.switch_screen(EMPTY_SCREEN)
            return None
        await self._show_card(index)
        return index

    async def _show_card(self, index: int) -> None:
        if not 0 <= index < len(self.collection):
            raise IndexError(f"Card index {index} out of range (size {len(self.collection)})")
        card = self.collection[index]
        self.current_index = index
        await asyncio.gather(self.engine.hide(CARD_FRONT), self.engine.hide(CARD_BACK))
        await self.engine.switch_screen(CARD_SCREEN)
        self.view.set_content(CARD_FRONT, render_face(card.front, card.score))
        self.view.set_content(CARD_BACK, render_face(card.back, card.score))
        face = CARD_FRONT if self.rng.random() < 0.5 else CARD_BACK
        await self.engine.show(face)

    async def _mark(self, correct: bool) -> int:
        index = self._require_current()
        await self.engine.settle(CARD_FRONT, CARD_BACK)
        score = await scoring.mark_card(self.collection, index, self.repository, correct)
        await self._next_card()
        return score
