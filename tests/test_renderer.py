"""Tests BlockRegistry + renderers HTML : dispatch total, blocs vides omis, boutons, échappement."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_blocks.blocks import normalize
from page_blocks.core.schemas import ProductRecord, RenderedBlock, SiteContext
from page_blocks.core.style import resolve_style
from page_blocks.renderer.html import clamp_text, format_price, link_button, render_page
from page_blocks.renderer.registry import BlockEntry, BlockRegistry


@pytest.fixture
def registry():
    return BlockRegistry()


def render(registry, block_type, raw, ctx=None, style=None):
    content = normalize(block_type, raw).content
    return registry.render(block_type, content, resolve_style(style), ctx or SiteContext())


# ── Dispatch ──────────────────────────────────────────────────────────────

class TestDispatch:
    def test_unknown_type_placeholder(self, registry):
        html = registry.render("nonexistent_type", {}, resolve_style({}), SiteContext())
        assert html is not None
        assert "block--unknown" in html
        assert "nonexistent_type" in html

    def test_unknown_type_escaped(self, registry):
        html = registry.render("<script>", {}, None, None)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_raw_content_normalized_on_the_fly(self, registry):
        html = registry.render("text", {"text": "  Bonjour "}, None, None)
        assert ">Bonjour</div>" in html

    def test_all_known_types_registered(self, registry):
        assert set(registry.types()) == {"header", "hero", "links", "text", "image", "divider", "products"}
        assert registry.title("hero") == "Hero"
        assert "carousel" not in registry

    def test_custom_entries(self):
        reg = BlockRegistry(entries={"text": BlockEntry("Texte", lambda c, s, ctx: f"<p>{c.text}</p>")})
        assert reg.render("text", {"text": "x"}) == "<p>x</p>"
        assert "block--unknown" in reg.render("hero", {})

    def test_injected_style_table_in_frame(self):
        reg = BlockRegistry(style_table={"padding": {"none": "padding:7px"}})
        html = reg.frame("b1", "text", "<p>x</p>", resolve_style({}))
        assert "padding:7px" in html
        assert 'data-block-id="b1"' in html


# ── Blocs vides → None ────────────────────────────────────────────────────

class TestEmptyBlocks:
    def test_empty_text(self, registry):
        assert render(registry, "text", {"text": "   "}) is None

    def test_links_without_items(self, registry):
        assert render(registry, "links", {"items": [{"title": "T", "url": ""}]}) is None

    def test_image_without_valid_url(self, registry):
        assert render(registry, "image", {}) is None
        assert render(registry, "image", {"url": "not a url"}) is None

    def test_empty_hero(self, registry):
        assert render(registry, "hero", {}) is None

    def test_divider_always_renders(self, registry):
        assert "divider__line" in render(registry, "divider", {})


# ── Renderers ─────────────────────────────────────────────────────────────

class TestRenderers:
    def test_text_escaped(self, registry):
        html = render(registry, "text", {"text": "<b>gras</b>", "align": "center"})
        assert "&lt;b&gt;gras&lt;/b&gt;" in html
        assert "text-block--center" in html

    def test_links_width_follows_layout(self, registry):
        raw = {"items": [{"title": "A", "url": "a.com"}]}
        assert "links--compact" in render(registry, "links", raw, SiteContext(layout_width="compact"))
        assert "links--full" in render(registry, "links", raw, SiteContext(layout_width="full"))

    def test_links_item_align_overrides_block(self, registry):
        raw = {"align": "center", "items": [{"title": "A", "url": "a.com", "align": "right"}]}
        assert "links__row--right" in render(registry, "links", raw)

    @pytest.mark.parametrize("button_style", ["solid", "outline", "soft"])
    def test_button_style(self, registry, button_style):
        raw = {"items": [{"title": "A", "url": "a.com"}]}
        html = render(registry, "links", raw, SiteContext(button_style=button_style))
        assert f"link-btn--{button_style}" in html

    def test_hero_split_image_side(self, registry):
        html = render(registry, "hero", {
            "variant": "split", "title": "T", "image_url": "img.example.com/a.jpg", "image_side": "left",
        })
        assert "hero--split" in html
        assert html.index("hero__media") < html.index("hero__content")

    def test_hero_background(self, registry):
        html = render(registry, "hero", {"variant": "background", "title": "T", "image_url": "img.example.com/a.jpg"})
        assert "background-image:url('https://img.example.com/a.jpg')" in html

    def test_hero_background_url_stays_inside_css_url(self, registry):
        url = "https://a.com/x');position:fixed;inset:0;('"
        html = render(registry, "hero", {"variant": "background", "title": "T", "image_url": url})
        assert "background-image:url('https://a.com/x%27%29;position:fixed;inset:0;%28%27')" in html
        assert "&#x27;" not in html.split("background-image:")[1].split('"')[0]
        assert "hero--overlay-medium" in html

    def test_hero_only_active_buttons(self, registry):
        html = render(registry, "hero", {
            "title": "T",
            "primary_button": {"title": "Go", "url": "#go"},
            "secondary_button": {"title": "Orphan"},
        })
        assert "Go" in html
        assert "Orphan" not in html

    def test_header_cta_requires_flag(self, registry):
        raw = {"brand_text": "Shop", "cta": {"label": "Buy", "url": "https://x.com"}}
        assert "header__cta" not in render(registry, "header", raw)
        assert "header__cta" in render(registry, "header", {**raw, "show_cta": True})

    def test_header_logo(self, registry):
        html = render(registry, "header", {"brand_text": "Shop", "logo_url": "cdn.example.com/l.png", "brand_url": "/"})
        assert 'class="header__logo"' in html
        assert 'href="/"' in html


class TestProducts:
    def _ctx(self, *products):
        return SiteContext(products=list(products))

    def test_empty_catalog_message(self, registry):
        html = render(registry, "products", {}, self._ctx())
        assert "products__empty" in html

    def test_limit_and_inactive(self, registry):
        products = [ProductRecord(id=str(i), page_id="p", title=f"P{i}") for i in range(5)]
        products[0] = products[0].model_copy(update={"is_active": False})
        html = render(registry, "products", {"limit": 2}, self._ctx(*products))
        assert "P0" not in html
        assert "P1" in html and "P2" in html
        assert "P3" not in html

    def test_price_and_description(self, registry):
        p = ProductRecord(id="1", page_id="p", title="Mug", price_cents=1250, currency="eur",
                          compare_at_cents=1500, description="x" * 300)
        html = render(registry, "products", {"description_max_chars": 20}, self._ctx(p))
        assert "12.50 EUR" in html
        assert "15 EUR" in html
        assert "x" * 19 + "…" in html
        assert "x" * 21 not in html

    def test_button_new_tab(self, registry):
        p = ProductRecord(id="1", page_id="p", title="Mug", external_url="shop.example.com/mug")
        same_tab = render(registry, "products", {}, self._ctx(p))
        new_tab = render(registry, "products", {"open_in_new_tab": True}, self._ctx(p))
        assert 'target="_blank"' not in same_tab
        assert 'target="_blank"' in new_tab


# ── Helpers ───────────────────────────────────────────────────────────────

class TestHelpers:
    def test_link_button_external(self):
        html = link_button("https://a.com", "A")
        assert 'target="_blank" rel="noreferrer noopener"' in html

    @pytest.mark.parametrize("href", ["#top", "/about"])
    def test_link_button_internal(self, href):
        assert "target=" not in link_button(href, "A", "outline")

    def test_format_price(self):
        assert format_price(None, "EUR") == ""
        assert format_price(1000, None) == "10 USD"
        assert format_price(999, "eur") == "9.99 EUR"

    def test_clamp_text(self):
        assert clamp_text("  court  ", 140) == "court"
        assert clamp_text("abcdef", 4) == "abc…"

    def test_render_page_document(self):
        nodes = [RenderedBlock(block_id="b1", type="text", order=1, html="<p>un</p>")]
        html = render_page(nodes, SiteContext(colors={"button_color": "#00ff00"}), title="Titre & co")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Titre &amp; co</title>" in html
        assert "--primary: 0 255 0;" in html
        assert "<p>un</p>" in html
