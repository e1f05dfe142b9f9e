"""Bundled garments and predefined outfits used when the backend is unavailable."""

from __future__ import annotations

from typing import Dict, List, Optional

from models.outfit import OutfitItem, OutfitItemRef, StaticOutfit

ASSET_ROOT = "assets/outfits"


def _asset(filename: str) -> str:
    return f"{ASSET_ROOT}/{filename}"


ALL_OUTFIT_ITEMS: List[OutfitItem] = [
    OutfitItem("item_hoodie1", "Cozy Hoodie", "Tops", _asset("hoodie1.png"), ["hoodie", "cozy", "casual", "comfort"]),
    OutfitItem("item_pants1", "Casual Pants", "Bottoms", _asset("pants1.png"), ["pants", "casual", "relaxed"]),
    OutfitItem("item_shoes1", "Sneakers", "Shoes", _asset("shoes1.png"), ["sneakers", "casual", "everyday"]),
    OutfitItem("item_dress1", "Summer Dress", "Dresses", _asset("dress1.png"), ["dress", "summer", "floral"]),
    OutfitItem("item_heals1", "Stylish Heels", "Shoes", _asset("heals1.png"), ["heels", "elegant", "date night"]),
    OutfitItem("item_jeans2", "Denim Jeans", "Bottoms", _asset("jeans2.png"), ["jeans", "denim", "streetwear"]),
    OutfitItem("item_shirt2", "Graphic Tee", "Tops", _asset("shirt2.png"), ["t-shirt", "graphic", "streetwear"]),
    OutfitItem("item_shoes2", "High Tops", "Shoes", _asset("shoes2.png"), ["high tops", "sneakers", "urban"]),
    OutfitItem("item_polo1", "Classic Polo", "Tops", _asset("Polo.png"), ["polo", "smart", "business casual"]),
    OutfitItem("item_trousers1", "Tailored Trousers", "Bottoms", _asset("trousers.png"), ["trousers", "tailored", "office"]),
    OutfitItem("item_shoes3", "Formal Shoes", "Shoes", _asset("Shoes3.png"), ["formal shoes", "leather", "formal"]),
]

PREDEFINED_OUTFITS: List[StaticOutfit] = [
    StaticOutfit(
        outfit_id="outfit1",
        name="Casual Comfort",
        preview_image=_asset("outfit1.png"),
        keywords=["casual", "comfort", "weekend", "male", "female"],
        items=[
            OutfitItemRef("item_hoodie1", "Cozy Hoodie"),
            OutfitItemRef("item_pants1", "Casual Pants"),
            OutfitItemRef("item_shoes1", "Sneakers"),
        ],
    ),
    StaticOutfit(
        outfit_id="outfit2",
        name="Summer Elegance",
        preview_image=_asset("outfit2.png"),
        keywords=["summer", "vacation", "elegant", "female"],
        items=[
            OutfitItemRef("item_dress1", "Summer Dress"),
            OutfitItemRef("item_heals1", "Stylish Heels"),
        ],
    ),
    StaticOutfit(
        outfit_id="outfit3",
        name="Street Vibe",
        preview_image=_asset("outfit3.png"),
        keywords=["street", "urban", "trendy", "male"],
        items=[
            OutfitItemRef("item_shirt2", "Graphic Tee"),
            OutfitItemRef("item_jeans2", "Denim Jeans"),
            OutfitItemRef("item_shoes2", "High Tops"),
        ],
    ),
    StaticOutfit(
        outfit_id="outfit4",
        name="Smart Casual",
        preview_image=_asset("outfit4.png"),
        keywords=["smart casual", "work", "male"],
        items=[
            OutfitItemRef("item_polo1", "Classic Polo"),
            OutfitItemRef("item_trousers1", "Tailored Trousers"),
            OutfitItemRef("item_shoes3", "Formal Shoes"),
        ],
    ),
]

_ITEMS_BY_ID: Dict[str, OutfitItem] = {item.item_id: item for item in ALL_OUTFIT_ITEMS}


def get_outfit_item_by_id(item_id: str) -> Optional[OutfitItem]:
    return _ITEMS_BY_ID.get(item_id)


def get_predefined_outfit_by_id(outfit_id: str) -> Optional[StaticOutfit]:
    for outfit in PREDEFINED_OUTFITS:
        if outfit.outfit_id == outfit_id:
            return outfit
    return None


def item_keywords_for(outfit: StaticOutfit) -> List[str]:
    """Flatten the keywords of every garment an outfit references."""

    keywords: List[str] = []
    for ref in outfit.items:
        item = get_outfit_item_by_id(ref.item_id)
        if item is not None:
            keywords.extend(item.keywords)
    return keywords


def get_outfit_details_for_navigation(outfit_id: str) -> Optional[List[Dict[str, str]]]:
    """Resolve an outfit's garments into the shape the outfit detail view expects.

    The reference label wins over the garment name when both are present.
    """

    outfit = get_predefined_outfit_by_id(outfit_id)
    if outfit is None:
        return None
    details: List[Dict[str, str]] = []
    for ref in outfit.items:
        item = get_outfit_item_by_id(ref.item_id)
        if item is None:
            continue
        details.append(
            {
                "id": item.item_id,
                "name": item.name,
                "category": item.category,
                "source": item.image_ref,
                "label": ref.label or item.name,
            }
        )
    return details


__all__ = [
    "ALL_OUTFIT_ITEMS",
    "PREDEFINED_OUTFITS",
    "get_outfit_details_for_navigation",
    "get_outfit_item_by_id",
    "get_predefined_outfit_by_id",
    "item_keywords_for",
]
