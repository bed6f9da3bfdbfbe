"""
PageComposer : orchestration lecture / écriture d'une page de blocs.

Lecture : store → normalize → resolve_style → registry.render → liste ordonnée de RenderedBlock
Écriture : contenu, style, variante, ancre, opérations d'ordre (déléguées à OrderEngine),
           puis relecture (la page rendue reflète toujours le store).
"""
import logging
from typing import Any, List, Optional

from .blocks import VARIANT_TYPES, NormalizedContent, normalize
from .blocks.products import PRODUCTS_LIMIT_MAX
from .core.fields import as_obj, normalize_anchor_id
from .core.schemas import Block, RenderedBlock, SiteContext
from .core.style import apply_style_preset, merge_style, resolve_style
from .engine.order import OrderEngine
from .engine.store import BlockStore, ProductCatalog, SiteContextProvider
from .errors import ContentValidationError
from .renderer.html import render_page
from .renderer.registry import DEFAULT_REGISTRY, BlockRegistry

log = logging.getLogger(__name__)


class PageComposer:
    """
    Usage:
        >>> composer = PageComposer(SqlBlockStore(), page_id)
        >>> composer.insert_at(1, "image")
        >>> html = composer.render_page()
    """

    def __init__(
        self,
        store: BlockStore,
        page_id: str,
        registry: Optional[BlockRegistry] = None,
        catalog: Optional[ProductCatalog] = None,
        site: Optional[SiteContextProvider] = None,
    ):
        self.store = store
        self.page_id = page_id
        self.registry = registry or DEFAULT_REGISTRY
        self.catalog = catalog if catalog is not None else (store if isinstance(store, ProductCatalog) else None)
        self.site = site if site is not None else (store if isinstance(store, SiteContextProvider) else None)
        self.engine = OrderEngine(store, page_id)

    @property
    def blocks(self) -> List[Block]:
        return self.engine.ensure_loaded()

    # ── Lecture ──────────────────────────────────────────────────────────────

    def site_context(self, with_products: bool = False) -> SiteContext:
        ctx = self.site.get_site_context(self.page_id) if self.site else SiteContext()
        if with_products and self.catalog:
            products = self.catalog.list_active_products(self.page_id, PRODUCTS_LIMIT_MAX)
            ctx = ctx.model_copy(update={"products": products})
        return ctx

    def normalize_block(self, block: Block, raw: Any = None) -> NormalizedContent:
        """Normalise le contenu d'un bloc ; la variante stockée sert de défaut pour hero/header."""
        data = dict(as_obj(block.content if raw is None else raw))
        if block.type in VARIANT_TYPES and block.variant and not data.get("variant"):
            data["variant"] = block.variant
        return normalize(block.type, data)

    def render_block(self, block: Block, ctx: SiteContext, anchor_id: Optional[str] = None) -> Optional[RenderedBlock]:
        """Rend un bloc dans son cadre ; None si rien d'affichable."""
        normalized = self.normalize_block(block)
        resolved = resolve_style(block.style)
        inner = self.registry.render(block.type, normalized.content, resolved, ctx)
        if inner is None:
            return None
        return RenderedBlock(
            block_id=block.id,
            type=block.type,
            order=block.order,
            anchor_id=anchor_id,
            hidden=block.hidden,
            html=self.registry.frame(block.id, block.type, inner, resolved, anchor_id=anchor_id),
        )

    def compose(self, include_hidden: bool = False) -> List[RenderedBlock]:
        """
        Arbre rendu de la page, dans l'ordre.

        Args:
            include_hidden: True pour la vue éditeur (blocs masqués inclus)

        Returns:
            Liste des blocs affichables ; les blocs sans contenu affichable sont omis
        """
        blocks = [b for b in self.engine.load() if include_hidden or not b.hidden]
        ctx = self.site_context(with_products=any(b.type == "products" for b in blocks))

        nodes: List[RenderedBlock] = []
        seen_anchors = set()
        for b in blocks:
            anchor = normalize_anchor_id(b.anchor_id) or None
            if anchor and anchor in seen_anchors:
                log.warning("page %s : ancre %r en double (bloc %s), ignorée", self.page_id, anchor, b.id)
                anchor = None
            node = self.render_block(b, ctx, anchor_id=anchor)
            if node is None:
                continue
            if anchor:
                seen_anchors.add(anchor)
            nodes.append(node)
        return nodes

    def render_page(self, title: str = "", include_hidden: bool = False) -> str:
        nodes = self.compose(include_hidden=include_hidden)
        return render_page(nodes, self.site_context(), title=title)

    # ── Écriture : contenu / style ───────────────────────────────────────────

    def save_content(self, block_id: str, raw: Any) -> NormalizedContent:
        """
        Normalise puis persiste le contenu. Sauvegarde refusée si un champ non vide est illisible.

        Raises:
            ContentValidationError: garde de sauvegarde (rien n'est écrit)
            PersistenceError: échec du store (liste rechargée)
        """
        block = self.engine.get(block_id)
        normalized = self.normalize_block(block, raw)
        if not normalized.can_save:
            log.info("bloc %s : sauvegarde refusée (%s)", block_id, ", ".join(normalized.errors))
            raise ContentValidationError(block.type, normalized.errors, normalized.field_validity, normalized.warnings)

        content = normalized.content.model_dump()
        partial = {"content": content}
        if block.type in VARIANT_TYPES:
            partial["variant"] = content["variant"]
        self.engine.update(block_id, **partial)
        return normalized

    def set_variant(self, block_id: str, variant: str) -> NormalizedContent:
        """Change la variante (hero/header) ; le contenu est renormalisé avec elle."""
        block = self.engine.get(block_id)
        data = {**as_obj(block.content), "variant": variant}
        return self.save_content(block_id, data)

    def save_style(self, block_id: str, patch: Any) -> Block:
        """Fusionne un patch de style (overrides mobile/desktop conservés)."""
        block = self.engine.get(block_id)
        return self.engine.update(block_id, style=merge_style(block.style, patch))

    def apply_preset(self, block_id: str, preset: str) -> Block:
        block = self.engine.get(block_id)
        return self.engine.update(block_id, style=apply_style_preset(block.style, preset))

    def set_anchor(self, block_id: str, anchor_id: Any) -> Block:
        return self.engine.update(block_id, anchor_id=normalize_anchor_id(anchor_id) or None)

    # ── Écriture : ordre (OrderEngine) ───────────────────────────────────────

    def insert_at(self, index: int, block_type: str) -> Block:
        return self.engine.insert_at(index, block_type)

    def move_to(self, block_id: str, index: int) -> List[Block]:
        return self.engine.move_to(block_id, index)

    def remove(self, block_id: str) -> List[Block]:
        return self.engine.remove(block_id)

    def set_hidden(self, block_id: str, hidden: bool) -> Block:
        return self.engine.set_hidden(block_id, hidden)
