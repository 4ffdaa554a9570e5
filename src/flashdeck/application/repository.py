"""
Card collection persistence over a PersistenceGateway.

The whole collection lives in one JSON blob: an array of
{front, back, tags, score} records. Older blobs that stored the score as
``numCorrect`` still load; they are written back with ``score``.
"""

import logging

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from flashdeck.domain.constants import DEFAULT_BLOB_KEY
from flashdeck.domain.errors import CorruptCollectionError
from flashdeck.domain.models import Card
from flashdeck.domain.ports import PersistenceGateway

from .collection import CardCollection

logger = logging.getLogger(__name__)


class CardRecord(BaseModel):
    """Wire shape of a single card."""

    front: str
    back: str
    tags: list[str] = Field(default_factory=list)
    score: int = Field(default=0, ge=0, validation_alias=AliasChoices("score", "numCorrect"))


_records = TypeAdapter(list[CardRecord])


def encode_cards(cards: list[Card]) -> str:
    records = [
        CardRecord(front=c.front, back=c.back, tags=list(c.tags), score=c.score) for c in cards
    ]
    return _records.dump_json(records).decode("utf-8")


def decode_cards(data: str | bytes) -> list[Card]:
    """
    Parse a stored blob into cards, normalizing tags.

    Raises:
        CorruptCollectionError: The blob is not a valid card array.
    """
    try:
        records = _records.validate_json(data)
    except ValidationError as e:
        raise CorruptCollectionError(f"Stored collection is unreadable: {e}") from e
    return [Card(front=r.front, back=r.back, tags=r.tags, score=r.score) for r in records]


class CardRepository:
    """Loads and saves a CardCollection under a single blob key."""

    def __init__(self, gateway: PersistenceGateway, key: str = DEFAULT_BLOB_KEY):
        self.gateway = gateway
        self.key = key

    async def load(self) -> CardCollection:
        """
        Load the collection, bootstrapping an empty one if the blob is missing.

        A missing blob yields an empty collection that is saved once right away.
        A blob that exists but cannot be read propagates its error; starting
        empty there would overwrite real data on the next save.
        """
        if not await self.gateway.exists(self.key):
            logger.info(f"No collection at '{self.key}', creating an empty one")
            collection = CardCollection()
            await self.save(collection)
            return collection

        data = await self.gateway.load(self.key)
        collection = CardCollection(decode_cards(data))
        logger.info(f"Loaded {len(collection)} cards from '{self.key}'")
        return collection

    async def save(self, collection: CardCollection) -> None:
        await self.gateway.save(self.key, encode_cards(collection.cards))
        logger.debug(f"Saved {len(collection)} cards to '{self.key}'")

