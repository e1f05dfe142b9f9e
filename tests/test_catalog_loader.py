"""Tests for catalog loading, static fallback and reshuffling."""

from __future__ import annotations

import random
from collections import Counter

from logic.catalog_loader import CatalogLoader, Provenance
from models.apparel_data import PREDEFINED_OUTFITS, get_outfit_details_for_navigation
from models.card import CreateCard, RemoteOutfitCard, StaticOutfitCard
from models.outfit import RemoteOutfit
from tools.image_resolver import StorageImageResolver
from tools.outfit_provider import MockOutfitProvider, OutfitFetchError


def _resolver() -> StorageImageResolver:
    return StorageImageResolver("https://storage.example/v1", project_id="proj", bucket_id="bucket")


def _remote_outfits() -> list[RemoteOutfit]:
    return [
        RemoteOutfit(name="Linen Weekend", file="file-linen", keywords=["Summer", "casual"], items=["item-a", "item-b"], remote_id="r1"),
        RemoteOutfit(name="Boardroom", file="file-board", keywords=["work"], items=["item-c"], remote_id="r2"),
        RemoteOutfit(name="Broken Image", file="", keywords=["party"]),
        RemoteOutfit(name="Club Night", file="file-club", keywords=["party"]),
    ]


def test_remote_catalog_has_single_leading_create_card():
    loader = CatalogLoader(MockOutfitProvider(_remote_outfits()), _resolver(), rng=random.Random(3))

    result = loader.load_catalog()

    assert result.provenance is Provenance.REMOTE
    assert result.fetch_error is None
    assert isinstance(result.cards[0], CreateCard)
    assert sum(isinstance(card, CreateCard) for card in result.cards) == 1
    assert all(isinstance(card, RemoteOutfitCard) for card in result.cards[1:])


def test_unresolvable_remote_records_are_dropped():
    loader = CatalogLoader(MockOutfitProvider(_remote_outfits()), _resolver(), rng=random.Random(1))

    result = loader.load_catalog()

    titles = {card.title for card in result.cards[1:]}
    assert titles == {"Linen Weekend", "Boardroom", "Club Night"}
    assert result.dropped == ["Broken Image"]
    assert result.outfit_count == 3


def test_remote_card_fields_are_normalised():
    loader = CatalogLoader(MockOutfitProvider(_remote_outfits()[:1]), _resolver())

    card = loader.load_catalog().cards[1]

    assert isinstance(card, RemoteOutfitCard)
    assert card.id == "r1"
    assert card.keywords == ["summer", "casual"]
    assert card.preview_source == "https://storage.example/v1/storage/buckets/bucket/files/file-linen/download?project=proj"
    assert card.remote_ref is not None and card.remote_ref.items == ["item-a", "item-b"]


def test_item_documents_enrich_remote_item_keywords():
    items = [
        {"file": "item-a", "keywords": ["Linen Shirt", "summer"]},
        {"file": "item-b", "keywords": ["sandals"]},
        {"file": "item-z", "keywords": ["unrelated"]},
        {"name": "no file"},
    ]
    loader = CatalogLoader(MockOutfitProvider(_remote_outfits()[:1], items=items), _resolver())

    card = loader.load_catalog().cards[1]

    assert card.item_keywords == ["linen shirt", "summer", "sandals"]


def test_fetch_failure_falls_back_to_static_catalog():
    provider = MockOutfitProvider(error=OutfitFetchError("getAllOutfits unreachable"))
    loader = CatalogLoader(provider, _resolver(), rng=random.Random(7))

    result = loader.load_catalog()

    assert result.provenance is Provenance.STATIC
    assert result.fetch_error == "getAllOutfits unreachable"
    assert {card.id for card in result.cards[1:]} == {outfit.outfit_id for outfit in PREDEFINED_OUTFITS}
    assert all(isinstance(card, StaticOutfitCard) for card in result.cards[1:])


def test_empty_remote_collection_falls_back_silently():
    loader = CatalogLoader(MockOutfitProvider([]), _resolver())

    result = loader.load_catalog()

    assert result.provenance is Provenance.STATIC
    assert result.fetch_error is None
    assert len(result.cards) == len(PREDEFINED_OUTFITS) + 1


def test_static_cards_flatten_item_keywords():
    loader = CatalogLoader(MockOutfitProvider([]), _resolver())

    cards = {card.id: card for card in loader.load_catalog().cards[1:]}

    summer = cards["outfit2"]
    assert "summer" in summer.keywords
    assert {"dress", "heels"} <= set(summer.item_keywords)
    assert "business casual" in cards["outfit4"].item_keywords


def test_reshuffle_is_permutation_without_network_call():
    provider = MockOutfitProvider(_remote_outfits())
    loader = CatalogLoader(provider, _resolver(), rng=random.Random(11))
    loaded = loader.load_catalog()

    reshuffled = loader.reshuffle()

    assert provider.calls == 1
    assert isinstance(reshuffled[0], CreateCard)
    assert Counter(card.id for card in reshuffled) == Counter(card.id for card in loaded.cards)


def test_reshuffle_changes_order_for_seeded_rng():
    outfits = [RemoteOutfit(name=f"Look {idx}", file=f"file-{idx}", keywords=["casual"]) for idx in range(12)]
    loader = CatalogLoader(MockOutfitProvider(outfits), _resolver(), rng=random.Random(5))
    first = [card.id for card in loader.load_catalog().cards]

    orders = {tuple(card.id for card in loader.reshuffle()) for _ in range(5)}

    assert len(orders | {tuple(first)}) > 1


def test_reshuffle_before_load_uses_static_catalog():
    loader = CatalogLoader(MockOutfitProvider(_remote_outfits()), _resolver())

    cards = loader.reshuffle()

    assert len(cards) == len(PREDEFINED_OUTFITS) + 1


def test_navigation_details_prefer_reference_labels():
    details = get_outfit_details_for_navigation("outfit1")

    assert details is not None
    assert [detail["label"] for detail in details] == ["Cozy Hoodie", "Casual Pants", "Sneakers"]
    assert details[0]["source"].endswith("hoodie1.png")
    assert get_outfit_details_for_navigation("missing") is None


def test_unexpected_provider_exception_falls_back_to_static():
    provider = MockOutfitProvider(error=ConnectionError("socket reset"))
    loader = CatalogLoader(provider, _resolver())

    result = loader.load_catalog()

    assert result.provenance is Provenance.STATIC
    assert result.fetch_error == "ConnectionError: socket reset"
    assert len(result.cards) == len(PREDEFINED_OUTFITS) + 1


def test_item_fetch_crash_leaves_item_keywords_empty():
    class _ItemsCrash(MockOutfitProvider):
        def fetch_items(self):
            raise KeyError("file")

    loader = CatalogLoader(_ItemsCrash(_remote_outfits()[:1]), _resolver())

    result = loader.load_catalog()

    assert result.provenance is Provenance.REMOTE
    assert result.cards[1].item_keywords == []
