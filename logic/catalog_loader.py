"""Builds the home screen card catalog from remote or bundled outfits.

The loader fetches the backend outfit collection once per load, falls back to
the bundled predefined outfits when the fetch fails or comes back empty, then
shuffles and normalises the source into the tagged :data:`models.card.Card`
variants with a single ``create`` card in front.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from models.apparel_data import PREDEFINED_OUTFITS, item_keywords_for
from models.card import Card, CreateCard, RemoteOutfitCard, StaticOutfitCard
from models.outfit import RemoteOutfit, StaticOutfit
from models.taxonomy import normalise_keywords
from outfit_app.logging_config import get_logger, log_event
from tools.image_resolver import StorageImageResolver
from tools.outfit_provider import OutfitFetchError, OutfitProvider

LOGGER = get_logger(__name__)

SourceRecord = Union[RemoteOutfit, StaticOutfit]


class Provenance(str, Enum):
    REMOTE = "remote"
    STATIC = "static"


@dataclass(frozen=True)
class CatalogSource:
    """The fetched outfit collection a catalog was built from."""

    provenance: Provenance
    records: Sequence[SourceRecord]
    item_keywords: Dict[str, List[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class CatalogLoadResult:
    """Outcome of a catalog load.

    ``fetch_error`` is set only when the static fallback was taken because the
    remote fetch failed; an empty remote collection falls back silently.
    """

    cards: List[Card]
    provenance: Provenance
    source: Optional[CatalogSource] = None
    dropped: List[str] = field(default_factory=list)
    fetch_error: Optional[str] = None

    @property
    def outfit_count(self) -> int:
        return len(self.cards) - 1


def _index_item_keywords(documents: Sequence[dict]) -> Dict[str, List[str]]:
    """Map storage file ids to garment keywords for items that carry both."""

    index: Dict[str, List[str]] = {}
    for document in documents:
        if not isinstance(document, dict):
            continue
        file_id = document.get("file")
        keywords = document.get("keywords")
        if not isinstance(file_id, str) or not file_id or not isinstance(keywords, list):
            continue
        index.setdefault(file_id, []).extend(normalise_keywords(keywords))
    return index


class CatalogLoader:
    """Produces ordered card lists for the home screen deck."""

    def __init__(
        self,
        provider: OutfitProvider,
        image_resolver: StorageImageResolver,
        static_outfits: Sequence[StaticOutfit] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.provider = provider
        self.image_resolver = image_resolver
        self.static_outfits = list(static_outfits if static_outfits is not None else PREDEFINED_OUTFITS)
        self.rng = rng or random.Random()
        self.source: Optional[CatalogSource] = None

    def load_catalog(self) -> CatalogLoadResult:
        """Fetch the outfit collection and build a fresh card list."""

        fetch_error: Optional[str] = None
        try:
            remote = self.provider.fetch_outfits()
        except OutfitFetchError as exc:
            fetch_error = str(exc)
            remote = []
            log_event(LOGGER, logging.WARNING, "catalog_fetch_failed", reason=fetch_error)
        except Exception as exc:
            fetch_error = f"{type(exc).__name__}: {exc}"
            remote = []
            log_event(LOGGER, logging.ERROR, "catalog_fetch_crashed", reason=fetch_error, exc_info=True)

        if remote:
            source = CatalogSource(Provenance.REMOTE, list(remote), self._fetch_item_keywords())
        else:
            if fetch_error is None:
                log_event(LOGGER, logging.INFO, "catalog_remote_empty")
            source = CatalogSource(Provenance.STATIC, list(self.static_outfits))

        self.source = source
        cards, dropped = self._build_cards(source)
        log_event(
            LOGGER,
            logging.INFO,
            "catalog_loaded",
            provenance=source.provenance.value,
            card_count=len(cards),
            dropped_count=len(dropped),
        )
        return CatalogLoadResult(
            cards=cards,
            provenance=source.provenance,
            source=source,
            dropped=dropped,
            fetch_error=fetch_error,
        )

    def reshuffle(self, source: CatalogSource | None = None) -> List[Card]:
        """Reshuffle an already-fetched source without touching the network."""

        target = source or self.source
        if target is None:
            target = CatalogSource(Provenance.STATIC, list(self.static_outfits))
        cards, _ = self._build_cards(target)
        return cards

    def _fetch_item_keywords(self) -> Dict[str, List[str]]:
        try:
            return _index_item_keywords(self.provider.fetch_items())
        except OutfitFetchError as exc:
            log_event(LOGGER, logging.INFO, "catalog_items_unavailable", reason=str(exc))
        except Exception as exc:
            log_event(LOGGER, logging.WARNING, "catalog_items_crashed", reason=repr(exc), exc_info=True)
        return {}

    def _build_cards(self, source: CatalogSource) -> tuple[List[Card], List[str]]:
        records = list(source.records)
        self.rng.shuffle(records)

        cards: List[Card] = [CreateCard()]
        dropped: List[str] = []
        for record in records:
            if isinstance(record, RemoteOutfit):
                card = self._remote_card(record, source.item_keywords)
                if card is None:
                    dropped.append(record.remote_id or record.name)
                    continue
                cards.append(card)
            else:
                cards.append(self._static_card(record))

        if dropped:
            log_event(LOGGER, logging.WARNING, "catalog_cards_dropped", outfits=dropped)
        return cards, dropped

    def _remote_card(self, record: RemoteOutfit, item_index: Dict[str, List[str]]) -> Optional[RemoteOutfitCard]:
        preview = self.image_resolver.try_resolve(record.file)
        if preview is None:
            return None
        item_keywords: List[str] = []
        for file_id in record.items:
            item_keywords.extend(item_index.get(file_id, []))
        return RemoteOutfitCard(
            id=record.remote_id or record.name,
            title=record.name,
            preview_source=preview,
            keywords=record.keywords,
            item_keywords=item_keywords,
            remote_ref=record,
        )

    @staticmethod
    def _static_card(record: StaticOutfit) -> StaticOutfitCard:
        return StaticOutfitCard(
            id=record.outfit_id,
            title=record.name,
            preview_source=record.preview_image,
            keywords=record.keywords,
            item_keywords=item_keywords_for(record),
            outfit=record,
        )


__all__ = ["CatalogLoadResult", "CatalogLoader", "CatalogSource", "Provenance"]
