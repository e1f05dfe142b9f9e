"""FastAPI server exposing the outfit catalog to the mobile client."""

from __future__ import annotations

import threading
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query

from logic.catalog_loader import CatalogLoadResult
from logic.catalog_search import apply_filter
from logic.history import sort_generated_records
from logic.validation import CatalogResponse, HistoryEntry, SearchRequest
from memory.user_profile import InvalidUserIdError
from models.card import Card, card_to_dict
from outfit_app.app import OutfitDeckApp
from outfit_app.logging_config import configure_logging


class _CatalogState:
    """Current catalog held by the server process."""

    def __init__(self, deck_app: OutfitDeckApp) -> None:
        self.deck_app = deck_app
        self.result: Optional[CatalogLoadResult] = None
        self.cards: List[Card] = []
        # Reentrant so shuffle and current can load under the same hold.
        self._lock = threading.RLock()

    def load(self) -> List[Card]:
        with self._lock:
            result = self.deck_app.catalog_loader.load_catalog()
            self.result = result
            self.cards = result.cards
            return self.cards

    def current(self) -> List[Card]:
        with self._lock:
            if self.result is None:
                return self.load()
            return self.cards

    def shuffle(self) -> List[Card]:
        with self._lock:
            if self.result is None:
                self.load()
            source = self.result.source if self.result else None
            self.cards = self.deck_app.catalog_loader.reshuffle(source)
            return self.cards

    @property
    def provenance(self) -> Optional[str]:
        return self.result.provenance.value if self.result else None


def _catalog_response(cards: List[Card], provenance: Optional[str]) -> CatalogResponse:
    return CatalogResponse(
        view_state="ready" if cards else "no_results",
        provenance=provenance,
        count=len(cards),
        cards=[card_to_dict(card) for card in cards],
    )


def create_app(deck_app: OutfitDeckApp | None = None) -> FastAPI:
    """Build the FastAPI instance around an :class:`OutfitDeckApp`."""

    configure_logging()
    deck_app = deck_app or OutfitDeckApp()
    state = _CatalogState(deck_app)
    app = FastAPI(title="Outfit Deck", version="0.1.0")

    @app.get("/healthz")
    def healthcheck() -> dict:
        """Lightweight readiness check."""

        return {
            "status": "ok",
            "service": "outfit-deck",
            "environment": deck_app.config.environment or "local",
            "catalog_source": "remote" if deck_app.config.backend_url else "static",
        }

    @app.get("/catalog", response_model=CatalogResponse)
    def get_catalog() -> CatalogResponse:
        """Return the current catalog, loading it on first use."""

        cards = state.current()
        return _catalog_response(cards, state.provenance)

    @app.post("/catalog/reload", response_model=CatalogResponse)
    def reload_catalog() -> CatalogResponse:
        cards = state.load()
        return _catalog_response(cards, state.provenance)

    @app.post("/catalog/shuffle", response_model=CatalogResponse)
    def shuffle_catalog() -> CatalogResponse:
        """Reshuffle the fetched outfits without another backend round trip."""

        cards = state.shuffle()
        return _catalog_response(cards, state.provenance)

    @app.post("/catalog/search", response_model=CatalogResponse)
    def search_catalog(request: SearchRequest) -> CatalogResponse:
        """Apply the filter panel to the current catalog."""

        records = deck_app.profile_cache.get_generated_records(request.user_id) if request.user_id else []
        cards = apply_filter(state.current(), request.to_filter_state(), records)
        return _catalog_response(cards, state.provenance)

    @app.get("/users/{user_id}/history", response_model=List[HistoryEntry])
    def generated_history(user_id: str, sort: str = Query("newest")) -> List[HistoryEntry]:
        """List the outfits a user already rendered, newest first by default."""

        try:
            records = deck_app.profile_cache.get_generated_records(user_id)
        except InvalidUserIdError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        try:
            records = sort_generated_records(records, sort)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return [
            HistoryEntry(
                image_id=record.image_id,
                outfit_id=record.outfit_id,
                created_at=record.created_at.isoformat() if record.created_at else None,
            )
            for record in records
        ]

    return app


def get_app() -> FastAPI:
    """Expose a configured FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
