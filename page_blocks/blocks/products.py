"""
Bloc Products : préférences d'affichage uniquement.
Les produits eux-mêmes viennent du catalogue externe (list_active_products).
"""
from typing import Any, Literal, Optional

from ..core.fields import as_bool, as_obj, choice, clamp_int, safe_trim
from .base import BlockContent, NormalizedContent

PRODUCTS_LIMIT_MAX = 200
IMAGE_RATIOS = ("4/3", "1/1", "16/9", "3/4")


class ProductsContent(BlockContent):
    title: str = "Products"
    subtitle: Optional[str] = None
    layout: Literal["grid", "list"] = "grid"
    columns: int = 2
    limit: int = 60
    show_price: bool = True
    show_description: bool = True
    description_max_chars: int = 140
    show_button: bool = True
    button_label: str = "View product"
    open_in_new_tab: bool = False
    image_ratio: Literal["4/3", "1/1", "16/9", "3/4"] = "4/3"
    image_fit: Literal["cover", "contain"] = "cover"
    header_align: Literal["left", "center", "right"] = "center"


def normalize_products(raw: Any) -> NormalizedContent:
    c = as_obj(raw)
    layout = choice(c.get("layout"), ("grid", "list"), "grid")
    content = ProductsContent(
        title=safe_trim(c.get("title")) or "Products",
        subtitle=safe_trim(c.get("subtitle")) or None,
        layout=layout,
        columns=clamp_int(c.get("columns"), 1, 3, 2) if layout == "grid" else 1,
        limit=clamp_int(c.get("limit"), 1, PRODUCTS_LIMIT_MAX, 60),
        show_price=as_bool(c.get("show_price"), True),
        show_description=as_bool(c.get("show_description"), True),
        description_max_chars=clamp_int(c.get("description_max_chars"), 20, 500, 140),
        show_button=as_bool(c.get("show_button"), True),
        button_label=safe_trim(c.get("button_label")) or "View product",
        open_in_new_tab=as_bool(c.get("open_in_new_tab"), False),
        image_ratio=choice(c.get("image_ratio"), IMAGE_RATIOS, "4/3"),
        image_fit=choice(c.get("image_fit"), ("cover", "contain"), "cover"),
        header_align=choice(c.get("header_align"), ("left", "center", "right"), "center"),
    )
    return NormalizedContent(content=content)
