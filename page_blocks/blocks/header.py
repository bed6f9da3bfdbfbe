"""Bloc Header : marque (texte/logo), liens de navigation, CTA optionnel."""
import os
from typing import Any, List, Literal, Optional

from ..core.fields import (
    as_bool, as_list, as_obj, choice, is_acceptable_link, is_valid_http_url, normalize_url, safe_trim,
)
from .base import BlockContent, NormalizedContent

HEADER_VARIANTS = ("default", "centered")


def default_site_name() -> str:
    return os.getenv("DEFAULT_SITE_NAME", "My Site")


class HeaderLink(BlockContent):
    label: str
    url: str


class HeaderCTA(BlockContent):
    label: str = ""
    url: str = ""


class HeaderContent(BlockContent):
    variant: Literal["default", "centered"] = "default"
    brand_text: str = ""
    brand_url: str = ""
    logo_url: str = ""
    links: List[HeaderLink] = []
    show_cta: bool = False
    cta: Optional[HeaderCTA] = None

    @property
    def cta_visible(self) -> bool:
        return bool(self.show_cta and self.cta and self.cta.label and self.cta.url)


def normalize_header(raw: Any) -> NormalizedContent:
    c = as_obj(raw)
    validity = {}
    warnings: List[str] = []

    links: List[HeaderLink] = []
    for i, row in enumerate(as_list(c.get("links"))):
        r = as_obj(row)
        # ancien format : {title, href}
        label = safe_trim(r.get("label") or r.get("title"))
        url = normalize_url(r.get("url") or r.get("href"))
        if not label and not url:
            continue
        ok = bool(label) and is_acceptable_link(url)
        validity[f"links[{i}]"] = ok
        if ok:
            links.append(HeaderLink(label=label, url=url))
        else:
            warnings.append(f"Lien {i + 1} : libellé et URL valides requis.")

    cta_raw = as_obj(c.get("cta"))
    cta_label = safe_trim(cta_raw.get("label", c.get("cta_label")))
    cta_url = normalize_url(cta_raw.get("url", c.get("cta_url")))
    cta = HeaderCTA(label=cta_label, url=cta_url) if (cta_label or cta_url) else None

    logo_url = normalize_url(c.get("logo_url"))
    brand_url = normalize_url(c.get("brand_url"))

    content = HeaderContent(
        variant=choice(c.get("variant"), HEADER_VARIANTS, "default"),
        brand_text=safe_trim(c.get("brand_text") or c.get("title")) or default_site_name(),
        brand_url=brand_url,
        logo_url=logo_url,
        links=links,
        show_cta=as_bool(c.get("show_cta"), False),
        cta=cta,
    )

    validity["logo_url"] = not logo_url or is_valid_http_url(logo_url)
    validity["brand_url"] = not brand_url or is_acceptable_link(brand_url)
    validity["cta.url"] = not cta_url or is_acceptable_link(cta_url)
    errors = [f for f in ("logo_url", "brand_url", "cta.url") if not validity[f]]
    return NormalizedContent(content=content, field_validity=validity, warnings=warnings, errors=errors)
