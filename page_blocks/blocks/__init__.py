"""
ContentNormalizer : un normaliseur par type de bloc + dispatch.

    >>> from page_blocks.blocks import normalize
    >>> normalize("links", {"items": [{"title": "A", "url": "a.com"}]}).content.items[0].url
    'https://a.com'
"""
import logging
from typing import Any, Callable, Dict, Optional

from ..core.fields import as_obj
from .base import BlockContent, GenericContent, NormalizedContent
from .text import TextContent, normalize_text
from .image import ImageContent, normalize_image
from .links import LinkItem, LinksContent, normalize_links
from .hero import HeroButton, HeroContent, normalize_hero
from .header import HeaderCTA, HeaderContent, HeaderLink, normalize_header
from .divider import DividerContent, normalize_divider
from .products import ProductsContent, normalize_products

log = logging.getLogger(__name__)

Normalizer = Callable[[Any], NormalizedContent]

BLOCK_NORMALIZERS: Dict[str, Normalizer] = {
    "header":   normalize_header,
    "hero":     normalize_hero,
    "links":    normalize_links,
    "text":     normalize_text,
    "image":    normalize_image,
    "divider":  normalize_divider,
    "products": normalize_products,
}

CONTENT_MODELS: Dict[str, type] = {
    "header":   HeaderContent,
    "hero":     HeroContent,
    "links":    LinksContent,
    "text":     TextContent,
    "image":    ImageContent,
    "divider":  DividerContent,
    "products": ProductsContent,
}

# Types dont le contenu porte la variante (miroir de Block.variant)
VARIANT_TYPES = ("hero", "header")

_DEFAULT_CONTENT: Dict[str, Dict[str, Any]] = {
    "header": {
        "brand_text": "My Site",
        "brand_url": "/",
        "links": [
            {"label": "About", "url": "https://example.com"},
            {"label": "Contact", "url": "https://example.com"},
        ],
        "show_cta": False,
        "cta": {"label": "Buy", "url": "https://example.com"},
    },
    "hero": {"title": "Your title", "subtitle": "Short subtitle"},
    "image": {
        "url": "https://images.unsplash.com/photo-1520975661595-6453be3f7070?auto=format&fit=crop&w=600&q=80",
        "alt": "Profile image",
        "shape": "circle",
    },
    "text": {"text": "Your text here"},
    "divider": {"style": "line"},
    "links": {
        "items": [{"title": "Telegram", "url": "https://t.me/yourname", "align": "center"}],
        "align": "center",
    },
    "products": {"title": "Products", "layout": "grid", "columns": 2, "limit": 60},
}

_DEFAULT_VARIANT: Dict[str, str] = {"hero": "default", "header": "default"}


def normalize(block_type: str, raw: Any) -> NormalizedContent:
    """Normalise un contenu brut selon son type. Type inconnu → contenu générique, sans erreur."""
    normalizer = BLOCK_NORMALIZERS.get(block_type)
    if normalizer is None:
        log.debug("normalize: type inconnu %r, contenu conservé", block_type)
        data = {k: v for k, v in as_obj(raw).items() if isinstance(k, str)}
        return NormalizedContent(content=GenericContent.model_validate(data))
    return normalizer(raw)


def default_content(block_type: str) -> Dict[str, Any]:
    """Contenu initial d'un nouveau bloc (déjà canonique)."""
    return normalize(block_type, _DEFAULT_CONTENT.get(block_type, {})).content.model_dump()


def default_variant(block_type: str) -> Optional[str]:
    return _DEFAULT_VARIANT.get(block_type)


__all__ = [
    "BlockContent", "GenericContent", "NormalizedContent",
    "TextContent", "ImageContent", "LinkItem", "LinksContent",
    "HeroButton", "HeroContent", "HeaderCTA", "HeaderContent", "HeaderLink",
    "DividerContent", "ProductsContent",
    "BLOCK_NORMALIZERS", "CONTENT_MODELS", "VARIANT_TYPES",
    "normalize", "default_content", "default_variant",
]
