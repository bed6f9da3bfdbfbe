"""
Bloc Links : liste de boutons-liens.

Une ligne n'est conservée que si le titre ET l'URL sont renseignés et que l'URL
est en http(s) valide. Les lignes partielles ou invalides ne sont pas persistées mais
remontées à l'éditeur (warnings + field_validity["items[i]"]).
"""
from typing import Any, List, Literal, Optional

from ..core.fields import as_list, as_obj, choice, is_valid_http_url, normalize_url, safe_trim
from .base import BlockContent, NormalizedContent

ALIGNS = ("left", "center", "right")


class LinkItem(BlockContent):
    title: str
    url: str
    align: Optional[Literal["left", "center", "right"]] = None


class LinksContent(BlockContent):
    items: List[LinkItem] = []
    align: Literal["left", "center", "right"] = "center"


def normalize_links(raw: Any) -> NormalizedContent:
    c = as_obj(raw)
    items: List[LinkItem] = []
    validity = {}
    warnings: List[str] = []

    for i, row in enumerate(as_list(c.get("items"))):
        r = as_obj(row)
        title = safe_trim(r.get("title") or r.get("label"))
        url = normalize_url(r.get("url") or r.get("href"))
        key = f"items[{i}]"

        if not title and not url:
            continue  # ligne vide : ignorée sans bruit
        if not title or not url:
            validity[key] = False
            warnings.append(f"Ligne {i + 1} : renseigner le texte ET l'URL, sinon elle ne sera pas enregistrée.")
            continue
        if not is_valid_http_url(url):
            validity[key] = False
            warnings.append(f"Ligne {i + 1} : l'URL doit être en http(s), ex. https://t.me/votrenom")
            continue

        validity[key] = True
        align = safe_trim(r.get("align")).lower()
        items.append(LinkItem(title=title, url=url, align=align if align in ALIGNS else None))

    content = LinksContent(items=items, align=choice(c.get("align"), ALIGNS, "center"))
    return NormalizedContent(content=content, field_validity=validity, warnings=warnings)
