"""Outfit deck bootstrap."""

from __future__ import annotations

import logging
import random

from outfit_app.config import AppConfig
from outfit_app.logging_config import configure_logging, get_logger, log_event
from controllers.home_screen import HomeScreenController
from logic.catalog_loader import CatalogLoader
from logic.deck_state import CardDeckStateMachine, HapticPulse
from memory.session import UserSession
from memory.user_profile import UserProfileCache
from tools.image_resolver import StorageImageResolver
from tools.outfit_provider import HttpOutfitProvider, OutfitProvider, StaticOutfitProvider


LOGGER = get_logger(__name__)


class OutfitDeckApp:
    """Wires together the catalog loader, profile cache and screen controllers."""

    def __init__(self, config: AppConfig | None = None, provider: OutfitProvider | None = None) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging()

        self.provider = provider or self._build_provider()
        self.image_resolver = StorageImageResolver(
            endpoint=self.config.storage_endpoint,
            project_id=self.config.storage_project_id,
            bucket_id=self.config.storage_bucket_id,
        )
        self.catalog_loader = CatalogLoader(
            provider=self.provider,
            image_resolver=self.image_resolver,
            rng=random.Random(self.config.shuffle_seed),
        )
        self.profile_cache = UserProfileCache(self.config.profile_cache_dir)

    def _build_provider(self) -> OutfitProvider:
        if self.config.backend_url:
            return HttpOutfitProvider(
                base_url=self.config.backend_url,
                timeout_seconds=self.config.request_timeout_seconds,
            )
        return StaticOutfitProvider()

    def start_session(self, user_id: str) -> UserSession:
        """Create the session object that lives until logout."""

        session = UserSession(user_id=user_id, profile_cache=self.profile_cache)
        log_event(LOGGER, logging.INFO, "session_started", session_id=session.session_id)
        return session

    def end_session(self, session: UserSession, clear_cache: bool = False) -> None:
        session.close(clear_cache=clear_cache)
        log_event(LOGGER, logging.INFO, "session_closed", session_id=session.session_id)

    def home_controller(self, session: UserSession, haptics: HapticPulse | None = None) -> HomeScreenController:
        return HomeScreenController(
            session=session,
            loader=self.catalog_loader,
            deck=CardDeckStateMachine(haptics=haptics),
        )


__all__ = ["OutfitDeckApp"]
