"""
page_blocks v0.3 : Moteur de composition de pages en blocs ordonnés.

Usage (lecture) :
    >>> from page_blocks import PageComposer, SqlBlockStore
    >>> composer = PageComposer(SqlBlockStore(), "page-1")
    >>> html = composer.render_page(title="Ma page")

Usage (édition) :
    >>> block = composer.insert_at(1, "image")
    >>> composer.save_content(block.id, {"url": "images.example.com/a.png"})
    >>> composer.save_style(block.id, {"padding": "md", "desktop": {"width": "wide"}})

Usage (briques pures) :
    >>> from page_blocks import normalize, resolve_style, BlockRegistry
    >>> BlockRegistry().render("text", normalize("text", {"text": "Bonjour"}).content, resolve_style({}))
"""

from .blocks import (
    BlockContent, NormalizedContent,
    TextContent, ImageContent, LinkItem, LinksContent,
    HeroButton, HeroContent, HeaderCTA, HeaderContent, HeaderLink,
    DividerContent, ProductsContent,
    normalize, default_content, default_variant,
)
from .core.schemas import Block, ProductRecord, RenderedBlock, SiteContext, BLOCK_TYPES
from .core.style import ResolvedStyle, DeviceStyle, resolve_style, merge_style, apply_style_preset, STYLE_PRESETS
from .core.design_system import STYLE_TABLE
from .renderer.registry import BlockEntry, BlockRegistry, DEFAULT_REGISTRY
from .engine import OrderEngine, BlockStore, ProductCatalog, SiteContextProvider
from .composer import PageComposer
from .database import SqlBlockStore
from .errors import PersistenceError, ContentValidationError, BlockNotFoundError, PageNotFoundError

__version__ = "0.3.0"

__all__ = [
    # contenus
    "BlockContent", "NormalizedContent",
    "TextContent", "ImageContent", "LinkItem", "LinksContent",
    "HeroButton", "HeroContent", "HeaderCTA", "HeaderContent", "HeaderLink",
    "DividerContent", "ProductsContent",
    "normalize", "default_content", "default_variant",
    # schémas
    "Block", "ProductRecord", "RenderedBlock", "SiteContext", "BLOCK_TYPES",
    # style
    "ResolvedStyle", "DeviceStyle", "resolve_style", "merge_style", "apply_style_preset",
    "STYLE_PRESETS", "STYLE_TABLE",
    # rendu
    "BlockEntry", "BlockRegistry", "DEFAULT_REGISTRY",
    # ordre + composition
    "OrderEngine", "BlockStore", "ProductCatalog", "SiteContextProvider",
    "PageComposer", "SqlBlockStore",
    # erreurs
    "PersistenceError", "ContentValidationError", "BlockNotFoundError", "PageNotFoundError",
]
