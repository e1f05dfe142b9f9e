"""Tests for the home screen controller and its session wiring."""

from __future__ import annotations

import asyncio
import random
import threading
from pathlib import Path

import pytest

from controllers.home_screen import HomeScreenController, ViewState
from logic.catalog_loader import CatalogLoader, CatalogLoadResult, Provenance
from logic.deck_state import CardDeckStateMachine
from memory.session import UserSession
from memory.user_profile import UserProfileCache
from models.card import CreateCard, StaticOutfitCard
from models.filter_state import FilterState, GeneratedStatus
from tools.image_resolver import StorageImageResolver
from tools.outfit_provider import MockOutfitProvider


def _result(card_id: str) -> CatalogLoadResult:
    card = StaticOutfitCard(id=card_id, title=card_id, preview_source=f"{card_id}.png", keywords=["casual"])
    return CatalogLoadResult(cards=[CreateCard(), card], provenance=Provenance.STATIC)


class _GatedLoader:
    """Loader whose ``slow_call``-th call blocks until released, to simulate a slow fetch."""

    def __init__(self, slow_call: int = 1) -> None:
        self.slow_call = slow_call
        self.calls = 0
        self._lock = threading.Lock()
        self.slow_started = threading.Event()
        self.release_slow = threading.Event()

    def load_catalog(self) -> CatalogLoadResult:
        with self._lock:
            self.calls += 1
            call = self.calls
        if call == self.slow_call:
            self.slow_started.set()
            self.release_slow.wait(timeout=5)
            return _result("stale")
        return _result("fresh")

    def reshuffle(self, source=None):
        return _result("shuffled").cards


def _session(tmp_path: Path, user_id: str = "user-1") -> UserSession:
    return UserSession(user_id=user_id, profile_cache=UserProfileCache(tmp_path))


def _static_loader(provider: MockOutfitProvider | None = None) -> CatalogLoader:
    resolver = StorageImageResolver("https://storage.example/v1", project_id="proj", bucket_id="bucket")
    return CatalogLoader(provider or MockOutfitProvider([]), resolver, rng=random.Random(2))


def test_view_state_is_loading_before_first_load(tmp_path: Path):
    controller = HomeScreenController(_session(tmp_path), _static_loader())

    assert controller.view_state is ViewState.LOADING
    assert controller.cards == []


def test_load_catalog_installs_cards(tmp_path: Path):
    controller = HomeScreenController(_session(tmp_path), _static_loader())

    result = asyncio.run(controller.load_catalog())

    assert result is not None and result.provenance is Provenance.STATIC
    assert controller.view_state is ViewState.READY
    assert controller.cards[0].id == "create"
    assert len(controller.cards) == 5


def test_stale_load_result_is_discarded(tmp_path: Path):
    loader = _GatedLoader()
    controller = HomeScreenController(_session(tmp_path), loader)  # type: ignore[arg-type]

    async def scenario():
        first = asyncio.create_task(controller.load_catalog())
        await asyncio.to_thread(loader.slow_started.wait, 5)
        assert controller.view_state is ViewState.LOADING
        second = await controller.load_catalog()
        loader.release_slow.set()
        stale = await first
        return second, stale

    second, stale = asyncio.run(scenario())

    assert stale is None
    assert second is not None
    assert [card.id for card in controller.cards] == ["create", "fresh"]
    assert controller.last_result is second
    assert controller.view_state is ViewState.READY


def test_search_uses_session_generated_records(tmp_path: Path):
    session = _session(tmp_path)
    session.record_generated_image("img-77", "outfit2")
    controller = HomeScreenController(session, _static_loader())
    asyncio.run(controller.load_catalog())

    generated = controller.search(FilterState(generated_status=GeneratedStatus.GENERATED))
    assert [card.id for card in generated] == ["outfit2"]

    not_generated = controller.search(FilterState(generated_status=GeneratedStatus.NOT_GENERATED))
    assert {card.id for card in not_generated} == {"outfit1", "outfit3", "outfit4"}


def test_closed_session_sees_no_generated_outfits(tmp_path: Path):
    session = _session(tmp_path)
    session.record_generated_image("img-1", "outfit1")
    controller = HomeScreenController(session, _static_loader())
    asyncio.run(controller.load_catalog())

    session.close()

    assert controller.search(FilterState(generated_status="generated")) == []


def test_no_results_view_state_and_clear(tmp_path: Path):
    controller = HomeScreenController(_session(tmp_path), _static_loader())
    asyncio.run(controller.load_catalog())

    controller.search(FilterState(query="no such look"))
    assert controller.view_state is ViewState.NO_RESULTS

    controller.clear_search()
    assert controller.view_state is ViewState.READY
    assert len(controller.cards) == 5


def test_shuffle_reuses_fetched_source(tmp_path: Path):
    provider = MockOutfitProvider([])
    controller = HomeScreenController(_session(tmp_path), _static_loader(provider))
    asyncio.run(controller.load_catalog())
    before = sorted(card.id for card in controller.cards)

    assert controller.shuffle() is True

    assert provider.calls == 1
    assert sorted(card.id for card in controller.cards) == before
    assert controller.deck.active_index == 1


def test_viewable_cards_delegate_to_deck(tmp_path: Path):
    pulses: list[int] = []
    deck = CardDeckStateMachine(haptics=lambda: pulses.append(1))
    controller = HomeScreenController(_session(tmp_path), _static_loader(), deck=deck)
    asyncio.run(controller.load_catalog())

    controller.on_viewable_cards_changed([1])
    controller.on_viewable_cards_changed([1])

    assert pulses == [1]


def test_cancelled_load_does_not_leave_screen_loading(tmp_path: Path):
    loader = _GatedLoader(slow_call=2)
    controller = HomeScreenController(_session(tmp_path), loader)  # type: ignore[arg-type]

    async def scenario():
        await controller.load_catalog()
        slow = asyncio.create_task(controller.load_catalog())
        await asyncio.to_thread(loader.slow_started.wait, 5)
        assert controller.view_state is ViewState.LOADING
        slow.cancel()
        try:
            with pytest.raises(asyncio.CancelledError):
                await slow
        finally:
            loader.release_slow.set()

    asyncio.run(scenario())

    assert not controller.is_loading
    assert controller.view_state is ViewState.READY
    assert [card.id for card in controller.cards] == ["create", "fresh"]


def test_unexpected_provider_error_falls_back_to_static(tmp_path: Path):
    provider = MockOutfitProvider(error=ConnectionError("socket reset"))
    controller = HomeScreenController(_session(tmp_path), _static_loader(provider))

    result = asyncio.run(controller.load_catalog())

    assert result is not None
    assert result.provenance is Provenance.STATIC
    assert result.fetch_error == "ConnectionError: socket reset"
    assert not controller.is_loading
    assert controller.view_state is ViewState.READY


def test_failed_loader_clears_loading_flag(tmp_path: Path):
    class _BrokenLoader:
        def load_catalog(self):
            raise RuntimeError("loader bug")

    controller = HomeScreenController(_session(tmp_path), _BrokenLoader())  # type: ignore[arg-type]

    with pytest.raises(RuntimeError):
        asyncio.run(controller.load_catalog())

    assert not controller.is_loading


def test_search_with_corrupted_profile_does_not_raise(tmp_path: Path):
    session = _session(tmp_path)
    session.profile_cache.save_profile(
        session.user_id, {"createdImages": [{"imageId": "img-1", "outfitId": "outfit3", "createdAt": 1e20}]}
    )
    controller = HomeScreenController(session, _static_loader())
    asyncio.run(controller.load_catalog())

    assert [card.id for card in controller.search(FilterState(generated_status="generated"))] == ["outfit3"]

    session.profile_cache.save_profile(session.user_id, {"createdImages": 5})
    assert controller.search(FilterState(generated_status="generated")) == []
    assert controller.view_state is ViewState.NO_RESULTS
