"""Simple entrypoint to load the outfit deck locally."""

import asyncio

from outfit_app.app import OutfitDeckApp


def main() -> None:
    app = OutfitDeckApp()
    session = app.start_session("local-user")
    controller = app.home_controller(session)
    result = asyncio.run(controller.load_catalog())
    if result is not None:
        print(f"Loaded {result.outfit_count} outfits from the {result.provenance.value} catalog")
        for card in controller.cards:
            print(f"- {card.title}")
    app.end_session(session)


if __name__ == "__main__":
    main()
