"""Tests for the collection codec and load/bootstrap/save."""

import json
from unittest.mock import AsyncMock

import pytest

from flashdeck.application.collection import CardCollection
from flashdeck.application.repository import CardRepository, decode_cards, encode_cards
from flashdeck.domain.errors import CorruptCollectionError, StorageError
from flashdeck.domain.models import Card


def test_encode_writes_flat_array(sample_cards):
    data = json.loads(encode_cards(sample_cards[:1]))
    assert data == [{"front": "hallo", "back": "hello", "tags": ["dutch"], "score": 0}]


def test_decode_normalizes_empty_tag_singleton():
    cards = decode_cards('[{"front": "a", "back": "b", "tags": [""], "score": 2}]')
    assert cards[0].tags == []


def test_empty_tag_normalization_survives_resave():
    cards = decode_cards('[{"front": "a", "back": "b", "tags": [""], "score": 0}]')
    again = decode_cards(encode_cards(cards))
    assert again[0].tags == []
    assert json.loads(encode_cards(again))[0]["tags"] == []


def test_decode_reads_legacy_num_correct():
    cards = decode_cards('[{"front": "a", "back": "b", "tags": [], "numCorrect": 3}]')
    assert cards[0].score == 3
    assert json.loads(encode_cards(cards))[0] == {
        "front": "a",
        "back": "b",
        "tags": [],
        "score": 3,
    }


@pytest.mark.parametrize(
    "blob",
    [
        "not json",
        '{"front": "a"}',
        '[{"front": "a"}]',
        '[{"front": "a", "back": "b", "tags": [], "score": -1}]',
    ],
)
def test_decode_rejects_malformed(blob):
    with pytest.raises(CorruptCollectionError):
        decode_cards(blob)


@pytest.mark.asyncio
async def test_missing_blob_bootstraps_with_single_empty_save(gateway):
    repo = CardRepository(gateway, "cards.json")

    collection = await repo.load()

    assert len(collection) == 0
    assert gateway.saves == [("cards.json", "[]")]


@pytest.mark.asyncio
async def test_existing_blob_loads_without_saving(gateway, sample_cards):
    gateway.blobs["cards.json"] = encode_cards(sample_cards)
    collection = await CardRepository(gateway).load()
    assert [c.front for c in collection] == ["hallo", "dank je", "bonjour"]
    assert gateway.saves == []


@pytest.mark.asyncio
async def test_corrupt_blob_propagates_and_is_not_overwritten(gateway):
    gateway.blobs["cards.json"] = "{{{"
    with pytest.raises(CorruptCollectionError):
        await CardRepository(gateway).load()
    assert gateway.saves == []
    assert gateway.blobs["cards.json"] == "{{{"


@pytest.mark.asyncio
async def test_unreadable_blob_propagates():
    gateway = AsyncMock()
    gateway.exists.return_value = True
    gateway.load.side_effect = StorageError("permission denied")

    with pytest.raises(StorageError, match="permission denied"):
        await CardRepository(gateway).load()
    gateway.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_save_uses_configured_key(gateway):
    repo = CardRepository(gateway, "deck.json")
    await repo.save(CardCollection([Card("a", "b")]))
    assert gateway.saves[0][0] == "deck.json"
