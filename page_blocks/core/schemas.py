"""
Schémas Pydantic du moteur de blocs.
Block (ligne stockée) → contenu normalisé + style résolu → rendu.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .fields import choice, normalize_hex_or_none

BLOCK_TYPES = ("header", "hero", "links", "text", "image", "divider", "products")

BlockType = Literal["header", "hero", "links", "text", "image", "divider", "products"]
LayoutWidth = Literal["compact", "wide", "full"]
ButtonStyle = Literal["solid", "outline", "soft"]


class Block(BaseModel):
    """Bloc stocké. `type` reste une chaîne libre : les types inconnus sont tolérés."""
    id: str
    page_id: str
    type: str
    variant: Optional[str] = None
    content: Dict[str, Any] = Field(default_factory=dict)
    style: Optional[Dict[str, Any]] = None
    anchor_id: Optional[str] = None
    order: int = 0
    hidden: bool = False


class ProductRecord(BaseModel):
    """Produit externe affiché par les blocs `products` (lecture seule)."""
    id: str
    page_id: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    external_url: Optional[str] = None
    currency: Optional[str] = None
    price_cents: Optional[int] = None
    compare_at_cents: Optional[int] = None
    is_active: bool = True
    sort_order: Optional[int] = None
    updated_at: Optional[datetime] = None


class SiteContext(BaseModel):
    """Contexte de site consommé (jamais modifié) par les renderers."""
    layout_width: LayoutWidth = "compact"
    button_style: ButtonStyle = "solid"
    colors: Dict[str, str] = Field(default_factory=dict)
    products: List[ProductRecord] = Field(default_factory=list)

    @classmethod
    def from_raw(
        cls,
        layout_width: Any = None,
        button_style: Any = None,
        colors: Optional[Dict[str, Any]] = None,
        products: Optional[List[ProductRecord]] = None,
    ) -> "SiteContext":
        """Construit un contexte depuis des valeurs stockées potentiellement invalides."""
        clean_colors = {}
        for key, raw in (colors or {}).items():
            value = normalize_hex_or_none(raw)
            if value:
                clean_colors[key] = value
        return cls(
            layout_width=choice(layout_width, ("compact", "wide", "full"), "compact"),
            button_style=choice(button_style, ("solid", "outline", "soft"), "solid"),
            colors=clean_colors,
            products=list(products or []),
        )


class RenderedBlock(BaseModel):
    """Nœud visuel d'un bloc rendu, dans l'ordre de la page."""
    block_id: str
    type: str
    order: int
    anchor_id: Optional[str] = None
    hidden: bool = False
    html: str
