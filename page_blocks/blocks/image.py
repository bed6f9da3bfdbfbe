"""Bloc Image : image seule (avatar, visuel) avec forme."""
from typing import Any, Literal

from ..core.fields import as_obj, choice, is_valid_http_url, normalize_url, safe_trim
from .base import BlockContent, NormalizedContent

IMAGE_SHAPES = ("circle", "rounded", "square")


class ImageContent(BlockContent):
    url: str = ""
    alt: str = ""
    shape: Literal["circle", "rounded", "square"] = "circle"


def normalize_image(raw: Any) -> NormalizedContent:
    c = as_obj(raw)
    url = normalize_url(c.get("url") or c.get("src"))
    url_ok = is_valid_http_url(url)

    content = ImageContent(
        url=url,
        alt=safe_trim(c.get("alt")),
        shape=choice(c.get("shape"), IMAGE_SHAPES, "circle"),
    )
    return NormalizedContent(
        content=content,
        field_validity={"url": url_ok},
        errors=[] if url_ok or not url else ["url"],
    )
