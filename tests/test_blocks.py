"""Tests ContentNormalizer : un normaliseur par type + dispatch + idempotence."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_blocks.blocks import (
    BLOCK_NORMALIZERS, GenericContent, HeaderContent, HeroContent, LinksContent,
    ProductsContent, default_content, default_variant, normalize,
)


# Entrées volontairement hétérogènes (alias, valeurs absurdes, champs manquants)
MESSY_INPUTS = {
    "text": [{"text": "  Bonjour  ", "size": "XL", "align": "Center"}, {}, None, "garbage"],
    "image": [{"src": "images.example.com/a.png", "alt": " Avatar ", "shape": "rounded"}, {"url": "not a url"}],
    "links": [
        {"items": [{"title": "T", "url": ""}, {"label": "A", "href": "a.com", "align": "left"}], "align": "right"},
        {"items": "nope"},
    ],
    "hero": [
        {
            "variant": "centered", "title": " Hi ", "avatar": "img.example.com/p.jpg",
            "primary_button_title": "Go", "primary_button_url": "go.example.com",
            "image_ratio": "1:1", "bg_overlay": "strong",
        },
        {"variant": "split", "image_side": "left", "secondary_button": {"title": "More", "url": "#more"}},
    ],
    "header": [
        {"title": "Legacy", "links": [{"title": "About", "href": "/about"}, {"label": "", "url": ""}],
         "show_cta": "true", "cta_label": "Buy", "cta_url": "shop.example.com"},
        {"variant": "centered", "logo_url": "cdn.example.com/logo.png"},
    ],
    "divider": [{"style": "line"}, {}, None],
    "products": [
        {"layout": "list", "columns": 3, "limit": 5000, "description_max_chars": 1, "subtitle": "  "},
        {"limit": "abc", "image_ratio": "16/9", "show_price": "no"},
    ],
}


# ── Idempotence ───────────────────────────────────────────────────────────

class TestIdempotence:
    @pytest.mark.parametrize("block_type", list(BLOCK_NORMALIZERS))
    def test_normalize_twice_is_stable(self, block_type):
        for raw in MESSY_INPUTS[block_type]:
            once = normalize(block_type, raw).content
            twice = normalize(block_type, once.model_dump()).content
            assert twice == once, (block_type, raw)

    @pytest.mark.parametrize("block_type", list(BLOCK_NORMALIZERS))
    def test_default_content_is_canonical(self, block_type):
        content = default_content(block_type)
        assert normalize(block_type, content).content.model_dump() == content

    def test_normalize_accepts_model_instance(self):
        once = normalize("hero", {"title": "T"}).content
        assert normalize("hero", once).content == once


# ── Text ──────────────────────────────────────────────────────────────────

class TestText:
    def test_trim_and_enums(self):
        c = normalize("text", {"text": "  Bonjour  ", "size": "XL", "align": "Center"}).content
        assert c.text == "Bonjour"
        assert c.size == "md"
        assert c.align == "center"

    def test_garbage(self):
        r = normalize("text", "garbage")
        assert r.content.text == ""
        assert r.can_save


# ── Image ─────────────────────────────────────────────────────────────────

class TestImage:
    def test_src_alias_and_https(self):
        r = normalize("image", {"src": "images.example.com/a.png"})
        assert r.content.url == "https://images.example.com/a.png"
        assert r.field_validity["url"] is True
        assert r.can_save

    def test_invalid_url_blocks_save(self):
        r = normalize("image", {"url": "not a url"})
        assert r.field_validity["url"] is False
        assert r.errors == ["url"]
        assert not r.can_save

    def test_empty_url_saves(self):
        r = normalize("image", {})
        assert r.content.url == ""
        assert r.can_save


# ── Links ─────────────────────────────────────────────────────────────────

class TestLinks:
    def test_reference_filtering(self):
        """Lignes partielles signalées, seule la ligne complète est conservée."""
        r = normalize("links", {"items": [
            {"title": "T", "url": ""},
            {"title": "", "url": "https://x"},
            {"title": "A", "url": "a.com"},
        ]})
        assert [i.model_dump(exclude_none=True) for i in r.content.items] == [{"title": "A", "url": "https://a.com"}]
        assert r.field_validity == {"items[0]": False, "items[1]": False, "items[2]": True}
        assert len(r.warnings) == 2
        assert r.can_save

    def test_empty_rows_are_silent(self):
        r = normalize("links", {"items": [{"title": "", "url": ""}, {}]})
        assert r.content.items == []
        assert r.field_validity == {}
        assert r.warnings == []

    def test_invalid_url_row_excluded(self):
        r = normalize("links", {"items": [{"title": "Bad", "url": "https://a b.com"}]})
        assert r.content.items == []
        assert r.field_validity == {"items[0]": False}
        assert len(r.warnings) == 1
        assert r.can_save

    def test_non_http_targets_rejected(self):
        r = normalize("links", {"items": [
            {"title": "Top", "url": "#top"},
            {"title": "Mail", "url": "mailto:a@b.com"},
            {"title": "Ok", "url": "https://ok.com"},
        ]})
        assert [i.url for i in r.content.items] == ["https://ok.com"]
        assert r.field_validity == {"items[0]": False, "items[1]": False, "items[2]": True}
        assert r.errors == []

    def test_aliases_and_align(self):
        c = normalize("links", MESSY_INPUTS["links"][0]).content
        assert isinstance(c, LinksContent)
        assert c.align == "right"
        assert c.items[0].title == "A"
        assert c.items[0].url == "https://a.com"
        assert c.items[0].align == "left"


# ── Hero ──────────────────────────────────────────────────────────────────

class TestHero:
    def test_legacy_fields(self):
        c = normalize("hero", MESSY_INPUTS["hero"][0]).content
        assert isinstance(c, HeroContent)
        assert c.variant == "default"
        assert c.title == "Hi"
        assert c.image_url == "https://img.example.com/p.jpg"
        assert c.primary_button.title == "Go"
        assert c.primary_button.url == "https://go.example.com"
        assert c.image_ratio == "square"
        assert c.background_overlay == "strong"

    def test_defaults(self):
        c = normalize("hero", {}).content
        assert (c.title_size, c.subtitle_size, c.align, c.vertical_align) == ("lg", "md", "center", "center")
        assert (c.image_side, c.image_size, c.image_ratio) == ("right", "md", "square")
        assert (c.background_height, c.background_overlay, c.background_radius) == ("md", "medium", "2xl")
        assert c.active_buttons() == []

    def test_button_needs_title_and_url(self):
        c = normalize("hero", {"primary_button": {"title": "Go"}, "secondary_button": {"title": "More", "url": "#more"}}).content
        assert [b.title for b in c.active_buttons()] == ["More"]

    def test_layout_gated_fields_kept(self):
        c = normalize("hero", {"variant": "default", "image_side": "left"}).content
        assert c.image_side == "left"

    def test_invalid_image_url_blocks_save(self):
        r = normalize("hero", {"title": "T", "image_url": "https://a b.com"})
        assert r.field_validity["image_url"] is False
        assert "image_url" in r.errors


# ── Header ────────────────────────────────────────────────────────────────

class TestHeader:
    def test_legacy_fields(self):
        r = normalize("header", MESSY_INPUTS["header"][0])
        c = r.content
        assert isinstance(c, HeaderContent)
        assert c.brand_text == "Legacy"
        assert [(l.label, l.url) for l in c.links] == [("About", "/about")]
        assert c.show_cta is True
        assert c.cta.label == "Buy"
        assert c.cta.url == "https://shop.example.com"
        assert c.cta_visible
        assert r.can_save

    def test_brand_fallback_from_env(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_SITE_NAME", "Atelier")
        assert normalize("header", {}).content.brand_text == "Atelier"

    def test_brand_fallback_default(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_SITE_NAME", raising=False)
        assert normalize("header", {}).content.brand_text == "My Site"

    def test_cta_hidden_without_flag(self):
        c = normalize("header", {"cta": {"label": "Buy", "url": "https://x.com"}}).content
        assert not c.cta_visible

    def test_partial_link_warns(self):
        r = normalize("header", {"links": [{"label": "Only label"}]})
        assert r.content.links == []
        assert r.field_validity["links[0]"] is False
        assert r.warnings


# ── Divider / Products / inconnu ──────────────────────────────────────────

class TestOthers:
    def test_divider_identity(self):
        assert normalize("divider", {"style": "line"}).content.model_dump() == {"style": "line"}

    def test_products_clamps(self):
        c = normalize("products", MESSY_INPUTS["products"][0]).content
        assert isinstance(c, ProductsContent)
        assert c.layout == "list"
        assert c.columns == 1
        assert c.limit == 200
        assert c.description_max_chars == 20
        assert c.subtitle is None

    def test_products_huge_numbers(self):
        r = normalize("products", {"limit": 10**400, "columns": 10**400, "description_max_chars": -(10**400)})
        assert r.content.limit == 200
        assert r.content.columns == 3
        assert r.content.description_max_chars == 20

    def test_products_fallbacks(self):
        c = normalize("products", MESSY_INPUTS["products"][1]).content
        assert c.limit == 60
        assert c.image_ratio == "16/9"
        assert c.show_price is False

    def test_unknown_type_kept_generic(self):
        r = normalize("carousel", {"slides": [1, 2]})
        assert isinstance(r.content, GenericContent)
        assert r.content.model_dump() == {"slides": [1, 2]}
        assert r.can_save

    def test_default_variants(self):
        assert default_variant("hero") == "default"
        assert default_variant("header") == "default"
        assert default_variant("text") is None
