"""
Design system du moteur de blocs.

Table unique token → valeur → déclarations CSS, partagée par le StyleResolver
et injectée dans le BlockRegistry. Aucune valeur n'est conditionnée par un autre token.
Dérive aussi les variables CSS de site (triplets RGB) depuis les couleurs personnalisées.
"""
from typing import Dict, Mapping

STYLE_TOKENS = ("padding", "width", "background", "radius", "border", "align")

DEFAULT_TOKENS: Dict[str, str] = {
    "padding":    "none",
    "width":      "full",
    "background": "none",
    "radius":     "2xl",
    "border":     "subtle",
    "align":      "left",
}

# Noms de champs hérités présents en base → nom canonique (mapping permanent)
TOKEN_ALIASES: Dict[str, str] = {
    "bg":            "background",
    "layout_width":  "width",
    "block_width":   "width",
    "content_width": "width",
}

# Valeurs héritées → valeur canonique, par token
VALUE_ALIASES: Dict[str, Dict[str, str]] = {
    "width":      {"compact": "content"},
    "background": {"soft": "card", "contrast": "highlight"},
}

StyleTable = Mapping[str, Mapping[str, str]]

STYLE_TABLE: Dict[str, Dict[str, str]] = {
    "padding": {
        "none": "padding:0",
        "sm":   "padding:10px",
        "md":   "padding:14px",
        "lg":   "padding:18px",
        "xl":   "padding:24px",
    },
    "width": {
        # conteneur centré étroit
        "content": "width:100%;max-width:28rem;margin-left:auto;margin-right:auto",
        "wide":    "width:100%;max-width:56rem;margin-left:auto;margin-right:auto",
        # pleine largeur
        "full":    "width:100%;max-width:none;margin-left:0;margin-right:0",
    },
    "background": {
        "none":      "background:transparent",
        "card":      "background:rgb(var(--surface, 255 255 255) / 0.05)",
        "highlight": "background:rgb(var(--surface, 255 255 255) / 0.10)",
    },
    "radius": {
        "none": "border-radius:0",
        "sm":   "border-radius:12px",
        "md":   "border-radius:16px",
        "lg":   "border-radius:20px",
        "xl":   "border-radius:24px",
        "2xl":  "border-radius:32px",
        "full": "border-radius:9999px",
    },
    "border": {
        "none":   "border:1px solid transparent",
        "subtle": "border:1px solid rgb(var(--border, 255 255 255) / 0.10)",
        "strong": "border:2px solid rgb(var(--border, 255 255 255) / 0.20)",
    },
    "align": {
        "left":   "text-align:left",
        "center": "text-align:center",
        "right":  "text-align:right",
    },
}

# Breakpoint au-delà duquel le descripteur "wide" s'applique
WIDE_BREAKPOINT_PX = 768


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convertit #RRGGBB en (R, G, B)."""
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def darken(hex_color: str, percent: int = 20) -> str:
    """Assombrit une couleur de X%."""
    r, g, b = hex_to_rgb(hex_color)
    factor = 1 - (percent / 100)
    r = max(0, int(r * factor))
    g = max(0, int(g * factor))
    b = max(0, int(b * factor))
    return f"#{r:02x}{g:02x}{b:02x}"


# Couleur de site (clé PageDB) → variable CSS consommée par les renderers
COLOR_VARS: Dict[str, str] = {
    "bg_color":          "--bg",
    "text_color":        "--text",
    "muted_color":       "--muted",
    "border_color":      "--border",
    "button_color":      "--primary",
    "button_text_color": "--button-text",
}


def generate_css_variables(colors: Mapping[str, str]) -> str:
    """
    Génère le bloc :root {} des couleurs personnalisées du site.
    Les couleurs absentes ne sont pas émises (le thème garde ses valeurs).

    Args:
        colors: couleurs déjà normalisées (#rrggbb) indexées par clé PageDB

    Returns:
        CSS ":root{...}" ou "" si aucune couleur
    """
    lines = []
    for key, var in COLOR_VARS.items():
        value = colors.get(key)
        if not value:
            continue
        r, g, b = hex_to_rgb(value)
        lines.append(f"  {var}: {r} {g} {b};")
        if key == "button_color":
            hr, hg, hb = hex_to_rgb(darken(value, 8))
            lines.append(f"  --primary-hover: {hr} {hg} {hb};")
    if not lines:
        return ""
    return ":root {\n" + "\n".join(lines) + "\n}"
