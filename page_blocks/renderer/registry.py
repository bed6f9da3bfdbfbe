"""
BlockRegistry : type de bloc → {nom affiché, renderer}.

Dispatch total : un type inconnu produit un placeholder inerte, jamais une exception.
La table de style est injectée (une seule source pour tous les renderers).
"""
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from ..blocks import BlockContent, CONTENT_MODELS, normalize
from ..core.design_system import STYLE_TABLE, StyleTable
from ..core.schemas import SiteContext
from ..core.style import ResolvedStyle, resolve_style
from .html import (
    render_block_frame,
    render_divider_block,
    render_header_block,
    render_hero_block,
    render_image_block,
    render_links_block,
    render_products_block,
    render_text_block,
    render_unknown_block,
)

RenderFn = Callable[[Any, ResolvedStyle, SiteContext], Optional[str]]


class BlockEntry(NamedTuple):
    title: str
    render: RenderFn


DEFAULT_ENTRIES: Dict[str, BlockEntry] = {
    "header":   BlockEntry("Header",   render_header_block),
    "hero":     BlockEntry("Hero",     render_hero_block),
    "links":    BlockEntry("Links",    render_links_block),
    "text":     BlockEntry("Text",     render_text_block),
    "image":    BlockEntry("Image",    render_image_block),
    "divider":  BlockEntry("Divider",  render_divider_block),
    "products": BlockEntry("Products", render_products_block),
}


class BlockRegistry:
    """
    Registry des renderers de blocs.

    Usage:
        >>> registry = BlockRegistry()
        >>> registry.render("text", {"text": "Bonjour"}, resolve_style({}), SiteContext())
        '<div class="text-block ...">Bonjour</div>'
    """

    def __init__(self, entries: Optional[Dict[str, BlockEntry]] = None, style_table: StyleTable = STYLE_TABLE):
        self.entries = dict(entries if entries is not None else DEFAULT_ENTRIES)
        self.style_table = style_table

    def __contains__(self, block_type: str) -> bool:
        return block_type in self.entries

    def types(self) -> List[str]:
        return list(self.entries)

    def title(self, block_type: str) -> str:
        entry = self.entries.get(block_type)
        return entry.title if entry else block_type

    def render(
        self,
        block_type: str,
        content: Any,
        style: Optional[ResolvedStyle] = None,
        context: Optional[SiteContext] = None,
    ) -> Optional[str]:
        """
        Rend le contenu d'un bloc.

        Args:
            block_type: tag du type (inconnu toléré)
            content: contenu normalisé ; un contenu brut est normalisé au passage
            style: style résolu (défauts si None)
            context: contexte de site (défauts si None)

        Returns:
            HTML du bloc, ou None si rien d'affichable
        """
        entry = self.entries.get(block_type)
        if entry is None:
            return render_unknown_block(block_type)

        model = CONTENT_MODELS.get(block_type)
        if not isinstance(content, BlockContent) or (model is not None and not isinstance(content, model)):
            content = normalize(block_type, content).content

        return entry.render(
            content,
            style if style is not None else resolve_style(None),
            context if context is not None else SiteContext(),
        )

    def frame(self, block_id: str, block_type: str, inner: str, style: ResolvedStyle, anchor_id: Optional[str] = None) -> str:
        return render_block_frame(block_id, block_type, inner, style, anchor_id=anchor_id, table=self.style_table)


DEFAULT_REGISTRY = BlockRegistry()
