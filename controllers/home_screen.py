"""Home screen controller coordinating catalog loads, search and the deck."""

from __future__ import annotations

import asyncio
import itertools
import logging
from enum import Enum
from typing import Iterable, List, Optional

from logic.catalog_loader import CatalogLoader, CatalogLoadResult, CatalogSource
from logic.deck_state import CardDeckStateMachine
from memory.session import UserSession
from models.card import Card
from models.filter_state import FilterState
from outfit_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


class ViewState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NO_RESULTS = "no_results"


class HomeScreenController:
    """Owns the catalog, filter state and deck index for one signed-in user.

    Catalog loads may overlap; each load takes a sequence token and only the
    most recently issued load is allowed to install its cards.
    """

    def __init__(
        self,
        session: UserSession,
        loader: CatalogLoader,
        deck: CardDeckStateMachine | None = None,
    ) -> None:
        self.session = session
        self.loader = loader
        self.deck = deck or CardDeckStateMachine()
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._pending_token: Optional[int] = None
        self.last_result: Optional[CatalogLoadResult] = None
        self._source: Optional[CatalogSource] = None

    @property
    def is_loading(self) -> bool:
        return self._pending_token is not None

    @property
    def view_state(self) -> ViewState:
        if self.is_loading or self.last_result is None:
            return ViewState.LOADING
        if not self.deck.displayed:
            return ViewState.NO_RESULTS
        return ViewState.READY

    @property
    def cards(self) -> List[Card]:
        return self.deck.displayed

    async def load_catalog(self) -> Optional[CatalogLoadResult]:
        """Load a fresh catalog; returns ``None`` if a newer load superseded it."""

        token = next(self._tokens)
        self._latest_token = token
        self._pending_token = token
        with operation_context("load_catalog", token=token):
            try:
                result = await asyncio.to_thread(self.loader.load_catalog)
            finally:
                # Cancelled or failed loads must not leave the screen spinning.
                if token == self._latest_token:
                    self._pending_token = None
            if token != self._latest_token:
                log_event(LOGGER, logging.INFO, "catalog_load_discarded", token=token, latest=self._latest_token)
                return None
            self.last_result = result
            self._source = result.source
            self.deck.replace_catalog(result.cards)
            return result

    def search(self, state: FilterState) -> List[Card]:
        results = self.deck.request_filter_apply(state, self.session.generated_records())
        log_event(
            LOGGER,
            logging.DEBUG,
            "catalog_search_applied",
            query_length=len(state.query),
            occasions=sorted(state.occasions),
            result_count=len(results),
        )
        return results

    def clear_search(self) -> List[Card]:
        return self.deck.clear_filter()

    def shuffle(self) -> bool:
        """Reshuffle the fetched source; ignored while another shuffle runs."""

        return self.deck.request_shuffle(lambda: self.loader.reshuffle(self._source))

    def on_viewable_cards_changed(self, viewable_indices: Iterable[int]) -> bool:
        return self.deck.on_viewable_cards_changed(viewable_indices)


__all__ = ["HomeScreenController", "ViewState"]
