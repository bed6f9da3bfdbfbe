"""
Bloc Hero : titre + sous-titre + 2 boutons optionnels, 3 variantes :
default (centré), split (texte + image), background (image de fond).

La variante conditionne les champs utiles (image_side pour split,
background_* pour background) ; les autres sont conservés mais ignorés au rendu.
"""
from typing import Any, Dict, List, Literal, Optional

from ..core.fields import as_obj, choice, is_acceptable_link, is_valid_http_url, normalize_url, safe_trim
from .base import BlockContent, NormalizedContent

HERO_VARIANTS = ("default", "split", "background")
SIZES = ("sm", "md", "lg")
ALIGNS = ("left", "center", "right")
VERTICAL_ALIGNS = ("top", "center", "bottom")
IMAGE_SIDES = ("left", "right")
IMAGE_SIZES = ("sm", "md", "lg", "xl", "2xl")
IMAGE_RATIOS = ("square", "4:3", "3:2", "16:9", "21:9")
BACKGROUND_HEIGHTS = ("sm", "md", "lg", "xl")
BACKGROUND_OVERLAYS = ("soft", "medium", "strong")
BACKGROUND_RADII = ("none", "sm", "md", "lg", "xl", "2xl", "full")

# Valeurs héritées encore présentes en base
_VARIANT_ALIASES = {"centered": "default"}
_IMAGE_SIZE_ALIASES = {"small": "sm", "medium": "md", "large": "lg", "x-large": "xl", "2x-large": "2xl"}
_IMAGE_RATIO_ALIASES = {"1:1": "square", "1/1": "square", "4/3": "4:3", "3/2": "3:2", "16/9": "16:9", "21/9": "21:9"}


class HeroButton(BlockContent):
    title: str = ""
    url: str = ""

    @property
    def active(self) -> bool:
        return bool(self.title and self.url)


class HeroContent(BlockContent):
    variant: Literal["default", "split", "background"] = "default"
    title: str = ""
    subtitle: str = ""
    title_size: Literal["sm", "md", "lg"] = "lg"
    subtitle_size: Literal["sm", "md", "lg"] = "md"
    align: Literal["left", "center", "right"] = "center"
    vertical_align: Literal["top", "center", "bottom"] = "center"
    image_url: str = ""
    image_side: Literal["left", "right"] = "right"
    image_size: Literal["sm", "md", "lg", "xl", "2xl"] = "md"
    image_ratio: Literal["square", "4:3", "3:2", "16:9", "21:9"] = "square"
    primary_button: HeroButton = HeroButton()
    secondary_button: HeroButton = HeroButton()
    background_height: Literal["sm", "md", "lg", "xl"] = "md"
    background_overlay: Literal["soft", "medium", "strong"] = "medium"
    background_radius: Literal["none", "sm", "md", "lg", "xl", "2xl", "full"] = "2xl"

    def active_buttons(self) -> List[HeroButton]:
        return [b for b in (self.primary_button, self.secondary_button) if b.active]


def _aliased(value: Any, aliases: Dict[str, str]) -> str:
    v = safe_trim(value).lower()
    return aliases.get(v, v)


def _button(c: dict, name: str) -> HeroButton:
    nested = as_obj(c.get(name))
    title = nested.get("title", c.get(f"{name}_title"))
    url = nested.get("url", c.get(f"{name}_url"))
    return HeroButton(title=safe_trim(title), url=normalize_url(url))


def _first(c: dict, *keys: str) -> Optional[Any]:
    for k in keys:
        if c.get(k) is not None:
            return c[k]
    return None


def normalize_hero(raw: Any) -> NormalizedContent:
    c = as_obj(raw)
    primary = _button(c, "primary_button")
    secondary = _button(c, "secondary_button")
    image_url = normalize_url(_first(c, "image_url", "avatar"))

    content = HeroContent(
        variant=choice(_aliased(c.get("variant"), _VARIANT_ALIASES), HERO_VARIANTS, "default"),
        title=safe_trim(c.get("title")),
        subtitle=safe_trim(c.get("subtitle")),
        title_size=choice(c.get("title_size"), SIZES, "lg"),
        subtitle_size=choice(c.get("subtitle_size"), SIZES, "md"),
        align=choice(c.get("align"), ALIGNS, "center"),
        vertical_align=choice(c.get("vertical_align"), VERTICAL_ALIGNS, "center"),
        image_url=image_url,
        image_side=choice(c.get("image_side"), IMAGE_SIDES, "right"),
        image_size=choice(_aliased(c.get("image_size"), _IMAGE_SIZE_ALIASES), IMAGE_SIZES, "md"),
        image_ratio=choice(_aliased(c.get("image_ratio"), _IMAGE_RATIO_ALIASES), IMAGE_RATIOS, "square"),
        primary_button=primary,
        secondary_button=secondary,
        background_height=choice(_first(c, "background_height", "bg_height"), BACKGROUND_HEIGHTS, "md"),
        background_overlay=choice(_first(c, "background_overlay", "bg_overlay"), BACKGROUND_OVERLAYS, "medium"),
        background_radius=choice(_first(c, "background_radius", "bg_radius"), BACKGROUND_RADII, "2xl"),
    )

    validity = {"image_url": not image_url or is_valid_http_url(image_url)}
    for name, btn in (("primary_button", primary), ("secondary_button", secondary)):
        validity[f"{name}.url"] = not btn.url or is_acceptable_link(btn.url)

    errors = [field for field, ok in validity.items() if not ok]
    return NormalizedContent(content=content, field_validity=validity, errors=errors)
