"""View-state machine for the horizontally snapping card deck."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from logic.catalog_search import apply_filter
from models.card import Card, is_create_card
from models.filter_state import FilterState
from models.generated import GeneratedRecord
from outfit_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

HapticPulse = Callable[[], None]


class DeckPhase(str, Enum):
    IDLE = "idle"
    SHUFFLING = "shuffling"


def _first_outfit_index(cards: Sequence[Card]) -> int:
    return 1 if len(cards) > 1 and not is_create_card(cards[1]) else 0


class CardDeckStateMachine:
    """Tracks the centred card, the shuffle phase and the active filter.

    ``active_index`` is updated independently of the phase. Haptic pulses are
    edge-triggered: repeated notifications for the same index stay silent.
    """

    def __init__(self, cards: Sequence[Card] = (), haptics: Optional[HapticPulse] = None) -> None:
        self._haptics = haptics
        self._original: List[Card] = list(cards)
        self._displayed: List[Card] = self._original
        self._filter_state = FilterState()
        self._phase = DeckPhase.IDLE
        self._active_index = 0

    @property
    def original(self) -> List[Card]:
        return self._original

    @property
    def displayed(self) -> List[Card]:
        return self._displayed

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def phase(self) -> DeckPhase:
        return self._phase

    @property
    def is_shuffling(self) -> bool:
        return self._phase is DeckPhase.SHUFFLING

    def replace_catalog(self, cards: Sequence[Card]) -> None:
        """Install a freshly loaded catalog and drop any active filter."""

        self._original = list(cards)
        self._displayed = self._original
        self._filter_state = FilterState()
        self._active_index = 0

    def on_viewable_cards_changed(self, viewable_indices: Iterable[int]) -> bool:
        """Record the lowest visible index; return True when a pulse fired."""

        indices = list(viewable_indices)
        if not indices:
            return False
        index = min(indices)
        if index == self._active_index:
            return False
        self._active_index = index
        if self._haptics is not None:
            self._haptics()
        return True

    def begin_shuffle(self) -> bool:
        if self._phase is not DeckPhase.IDLE:
            log_event(LOGGER, logging.DEBUG, "deck_shuffle_ignored", phase=self._phase.value)
            return False
        self._phase = DeckPhase.SHUFFLING
        return True

    def complete_shuffle(self, cards: Sequence[Card]) -> None:
        """Finish a shuffle: new lists, cleared search, first outfit centred."""

        self._original = list(cards)
        self._displayed = self._original
        self._filter_state = FilterState()
        self._active_index = _first_outfit_index(self._original)
        self._phase = DeckPhase.IDLE
        log_event(LOGGER, logging.DEBUG, "deck_shuffled", card_count=len(self._original))

    def request_shuffle(self, reshuffle: Callable[[], Sequence[Card]]) -> bool:
        if not self.begin_shuffle():
            return False
        try:
            cards = reshuffle()
        except Exception:
            self._phase = DeckPhase.IDLE
            raise
        self.complete_shuffle(cards)
        return True

    def request_filter_apply(
        self, state: FilterState, generated_records: Iterable[GeneratedRecord] = ()
    ) -> List[Card]:
        if self._phase is not DeckPhase.IDLE:
            log_event(LOGGER, logging.DEBUG, "deck_filter_ignored", phase=self._phase.value)
            return self._displayed
        self._filter_state = state
        self._displayed = apply_filter(self._original, state, generated_records)
        return self._displayed

    def clear_filter(self) -> List[Card]:
        return self.request_filter_apply(FilterState())


__all__ = ["CardDeckStateMachine", "DeckPhase", "HapticPulse"]
