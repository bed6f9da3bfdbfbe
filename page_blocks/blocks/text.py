"""Bloc Text : paragraphe libre avec taille et alignement."""
from typing import Any, Literal

from ..core.fields import as_obj, choice, safe_trim
from .base import BlockContent, NormalizedContent

TEXT_SIZES = ("sm", "md", "lg")
ALIGNS = ("left", "center", "right")


class TextContent(BlockContent):
    text: str = ""
    size: Literal["sm", "md", "lg"] = "md"
    align: Literal["left", "center", "right"] = "left"


def normalize_text(raw: Any) -> NormalizedContent:
    # texte vide conservé : il ne sera simplement pas rendu
    c = as_obj(raw)
    content = TextContent(
        text=safe_trim(c.get("text")),
        size=choice(c.get("size"), TEXT_SIZES, "md"),
        align=choice(c.get("align"), ALIGNS, "left"),
    )
    return NormalizedContent(content=content)
