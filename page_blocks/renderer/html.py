"""
Renderer HTML : un renderer pur par type de bloc.

Signature commune : (contenu normalisé, style résolu, contexte de site) → HTML | None.
None = rien d'affichable (bloc omis, pas de coquille vide).
"""
from html import escape
from typing import Iterable, Optional

from ..blocks import (
    DividerContent, HeaderContent, HeroButton, HeroContent,
    ImageContent, LinksContent, ProductsContent, TextContent,
)
from ..core.design_system import STYLE_TABLE, StyleTable, generate_css_variables
from ..core.fields import is_external_link, is_valid_http_url, normalize_url, safe_trim
from ..core.schemas import ProductRecord, RenderedBlock, SiteContext
from ..core.style import ResolvedStyle, frame_css


def _attr(value: str) -> str:
    return escape(value, quote=True)


# Caractères qui terminent url('…') une fois l'attribut décodé par le navigateur
_CSS_URL_ESCAPES = str.maketrans({"'": "%27", '"': "%22", "(": "%28", ")": "%29", "\\": "%5C"})


def _css_url(url: str) -> str:
    return f"url('{_attr(url.translate(_CSS_URL_ESCAPES))}')"


# ── Bouton-lien (partagé hero / links / header / products) ──────────────────

def link_button(href: str, label: str, button_style: str = "solid", css_class: str = "") -> str:
    classes = ["link-btn", f"link-btn--{button_style}"]
    if css_class:
        classes.append(css_class)
    extra = ' target="_blank" rel="noreferrer noopener"' if is_external_link(href) else ""
    return f'<a href="{_attr(href)}" class="{" ".join(classes)}"{extra}>{escape(label)}</a>'


# ── Text ─────────────────────────────────────────────────────────────────────

def render_text_block(c: TextContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    if not c.text:
        return None
    return (
        f'<div class="text-block text-block--{c.size} text-block--{c.align}" '
        f'style="white-space:pre-wrap">{escape(c.text)}</div>'
    )


# ── Image ────────────────────────────────────────────────────────────────────

_SHAPE_RADIUS = {"circle": "9999px", "rounded": "24px", "square": "0px"}


def render_image_block(c: ImageContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    if not is_valid_http_url(c.url):
        return None
    alt = c.alt or "Image"
    return (
        f'<div class="image-block image-block--{c.shape}">'
        f'<img src="{_attr(c.url)}" alt="{_attr(alt)}" class="image-block__img" '
        f'style="border-radius:{_SHAPE_RADIUS[c.shape]}"></div>'
    )


# ── Links ────────────────────────────────────────────────────────────────────

_LINKS_WIDTH = {"compact": "links--compact", "wide": "links--wide", "full": "links--full"}
_ROW_ALIGN = {"left": "links__row--left", "center": "links__row--center", "right": "links__row--right"}


def render_links_block(c: LinksContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    if not c.items:
        return None
    rows = []
    for item in c.items:
        align = item.align or c.align
        rows.append(
            f'<div class="links__row {_ROW_ALIGN[align]}">'
            f'{link_button(item.url, item.title, ctx.button_style)}</div>'
        )
    return f'<div class="links {_LINKS_WIDTH[ctx.layout_width]}">{"".join(rows)}</div>'


# ── Hero ─────────────────────────────────────────────────────────────────────

def _hero_buttons(buttons: Iterable[HeroButton], button_style: str) -> str:
    html = "".join(link_button(b.url, b.title, button_style, "hero__btn") for b in buttons)
    return f'<div class="hero__cta-group">{html}</div>' if html else ""


def _hero_text(c: HeroContent, button_style: str) -> str:
    title = f'<h1 class="hero__title hero__title--{c.title_size}">{escape(c.title)}</h1>' if c.title else ""
    subtitle = (
        f'<p class="hero__subtitle hero__subtitle--{c.subtitle_size}">{escape(c.subtitle)}</p>'
        if c.subtitle else ""
    )
    return f'<div class="hero__content">{title}{subtitle}{_hero_buttons(c.active_buttons(), button_style)}</div>'


def render_hero_block(c: HeroContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    has_image = is_valid_http_url(c.image_url)
    if not (c.title or c.subtitle or c.active_buttons() or (has_image and c.variant != "default")):
        return None

    classes = ["hero", f"hero--{c.variant}", f"hero--align-{c.align}", f"hero--valign-{c.vertical_align}"]
    inner = _hero_text(c, ctx.button_style)

    if c.variant == "split":
        classes.append(f"hero--image-{c.image_side}")
        image = ""
        if has_image:
            image = (
                f'<div class="hero__media hero__media--{c.image_size} hero__media--ratio-{c.image_ratio.replace(":", "x")}">'
                f'<img src="{_attr(c.image_url)}" alt="" class="hero__image"></div>'
            )
        parts = [image, inner] if c.image_side == "left" else [inner, image]
        return f'<div class="{" ".join(classes)}">{"".join(parts)}</div>'

    if c.variant == "background":
        classes += [
            f"hero--height-{c.background_height}",
            f"hero--overlay-{c.background_overlay}",
            f"hero--radius-{c.background_radius}",
        ]
        style_attr = f' style="background-image:{_css_url(c.image_url)}"' if has_image else ""
        return f'<div class="{" ".join(classes)}"{style_attr}><div class="hero__overlay"></div>{inner}</div>'

    return f'<div class="{" ".join(classes)}">{inner}</div>'


# ── Header ───────────────────────────────────────────────────────────────────

def render_header_block(c: HeaderContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    if is_valid_http_url(c.logo_url):
        brand_inner = f'<img src="{_attr(c.logo_url)}" alt="{_attr(c.brand_text)}" class="header__logo">'
    else:
        brand_inner = escape(c.brand_text)
    if c.brand_url:
        brand = f'<a href="{_attr(c.brand_url)}" class="header__brand">{brand_inner}</a>'
    else:
        brand = f'<span class="header__brand">{brand_inner}</span>'

    links_html = "".join(
        f'<li><a href="{_attr(lnk.url)}" class="header__link">{escape(lnk.label)}</a></li>'
        for lnk in c.links
    )
    nav = f'<ul class="header__links">{links_html}</ul>' if links_html else ""
    cta = link_button(c.cta.url, c.cta.label, ctx.button_style, "header__cta") if c.cta_visible else ""

    return f'<header class="header header--{c.variant}"><div class="header__inner">{brand}{nav}{cta}</div></header>'


# ── Divider ──────────────────────────────────────────────────────────────────

def render_divider_block(c: DividerContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    return '<div class="divider"><hr class="divider__line"></div>'


# ── Products ─────────────────────────────────────────────────────────────────

def format_price(price_cents: Optional[int], currency: Optional[str]) -> str:
    if price_cents is None:
        return ""
    amount = price_cents / 100
    cur = (currency or "USD").upper()
    return f"{amount:.0f} {cur}" if amount == int(amount) else f"{amount:.2f} {cur}"


def clamp_text(text: Optional[str], max_chars: int = 140) -> str:
    t = safe_trim(text)
    if len(t) <= max_chars:
        return t
    return t[:max_chars - 1].rstrip() + "…"


def _product_card(p: ProductRecord, c: ProductsContent, button_style: str) -> str:
    parts = []
    image = normalize_url(p.image_url)
    if is_valid_http_url(image):
        parts.append(
            f'<div class="product__media product__media--{c.image_ratio.replace("/", "x")} product__media--{c.image_fit}">'
            f'<img src="{_attr(image)}" alt="{_attr(safe_trim(p.title))}"></div>'
        )
    parts.append(f'<div class="product__title">{escape(safe_trim(p.title) or "Untitled")}</div>')
    if p.subtitle:
        parts.append(f'<div class="product__subtitle">{escape(safe_trim(p.subtitle))}</div>')
    if c.show_description and p.description:
        parts.append(f'<p class="product__description">{escape(clamp_text(p.description, c.description_max_chars))}</p>')
    if c.show_price and p.price_cents is not None:
        compare = ""
        if p.compare_at_cents and p.compare_at_cents > p.price_cents:
            compare = f' <s class="product__compare">{format_price(p.compare_at_cents, p.currency)}</s>'
        parts.append(f'<div class="product__price">{format_price(p.price_cents, p.currency)}{compare}</div>')
    url = normalize_url(p.external_url)
    if c.show_button and url:
        btn = link_button(url, c.button_label, button_style, "product__btn")
        if not c.open_in_new_tab:
            btn = btn.replace(' target="_blank" rel="noreferrer noopener"', "")
        parts.append(btn)
    return f'<div class="product">{"".join(parts)}</div>'


def render_products_block(c: ProductsContent, style: ResolvedStyle, ctx: SiteContext) -> Optional[str]:
    subtitle = f'<div class="products__subtitle">{escape(clamp_text(c.subtitle, 200))}</div>' if c.subtitle else ""
    head = f'<div class="products__head products__head--{c.header_align}"><div class="products__title">{escape(c.title)}</div>{subtitle}</div>'

    products = [p for p in ctx.products if p.is_active][:c.limit]
    if not products:
        body = '<div class="products__empty">No active products yet.</div>'
    else:
        cards = "".join(_product_card(p, c, ctx.button_style) for p in products)
        body = f'<div class="products__{c.layout} products__{c.layout}--{c.columns}col">{cards}</div>'
    return f'<div class="products">{head}{body}</div>'


# ── Type inconnu ─────────────────────────────────────────────────────────────

def render_unknown_block(block_type: str) -> str:
    """Placeholder visible mais inerte."""
    return (
        f'<div class="block block--unknown" data-unknown-type="{_attr(str(block_type))}">'
        f'Type de bloc inconnu : <code>{escape(str(block_type))}</code></div>'
    )


# ── Cadre + page ─────────────────────────────────────────────────────────────

def render_block_frame(
    block_id: str,
    block_type: str,
    inner: str,
    resolved: ResolvedStyle,
    anchor_id: Optional[str] = None,
    table: StyleTable = STYLE_TABLE,
) -> str:
    """Enveloppe un bloc rendu dans son cadre stylé (mobile-first + override desktop)."""
    bid = _attr(block_id)
    css = frame_css(f'[data-block-id="{bid}"]>.block-frame', resolved, table)
    id_attr = f' id="{_attr(anchor_id)}"' if anchor_id else ""
    return (
        f'<section class="block block--{_attr(block_type)}" data-block-id="{bid}"{id_attr}>'
        f"<style>{css}</style>"
        f'<div class="block-frame">{inner}</div></section>'
    )


def render_page(nodes: Iterable[RenderedBlock], ctx: SiteContext, title: str = "") -> str:
    """Document HTML minimal autour des blocs rendus (l'habillage de page reste externe)."""
    css_vars = generate_css_variables(ctx.colors)
    style = f"<style>{css_vars}</style>" if css_vars else ""
    body = "\n".join(n.html for n in nodes)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  {style}
</head>
<body>
<main class="page page--{ctx.layout_width}">
{body}
</main>
</body>
</html>"""
