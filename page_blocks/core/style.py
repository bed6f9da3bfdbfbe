"""
StyleResolver : cascade responsive des tokens de style.

    style brut (tokens + mobile/desktop partiels, alias hérités)
      → base normalisée
      → compact = base ⊕ mobile   (mobile-first, toujours appliqué)
      → wide    = base ⊕ desktop  (au-delà du breakpoint, indépendant de mobile)
      → déclarations CSS via STYLE_TABLE

resolve_style() est pure et totale : toute entrée, même vide ou absurde,
produit deux descripteurs complets.
"""
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel

from .design_system import (
    DEFAULT_TOKENS,
    STYLE_TABLE,
    STYLE_TOKENS,
    TOKEN_ALIASES,
    VALUE_ALIASES,
    WIDE_BREAKPOINT_PX,
    StyleTable,
)
from .fields import as_obj, safe_trim


class DeviceStyle(BaseModel):
    """Descripteur concret pour un viewport (tous les tokens renseignés)."""
    padding: str = DEFAULT_TOKENS["padding"]
    width: str = DEFAULT_TOKENS["width"]
    background: str = DEFAULT_TOKENS["background"]
    radius: str = DEFAULT_TOKENS["radius"]
    border: str = DEFAULT_TOKENS["border"]
    align: str = DEFAULT_TOKENS["align"]

    def tokens(self) -> Dict[str, str]:
        return {t: getattr(self, t) for t in STYLE_TOKENS}

    def presentation(self, table: StyleTable = STYLE_TABLE) -> Dict[str, str]:
        """Token → déclarations CSS (lookup pur)."""
        out = {}
        for t in STYLE_TOKENS:
            values = table.get(t, {})
            out[t] = values.get(getattr(self, t), values.get(DEFAULT_TOKENS[t], ""))
        return out

    def css(self, table: StyleTable = STYLE_TABLE) -> str:
        return ";".join(v for v in self.presentation(table).values() if v)


class ResolvedStyle(BaseModel):
    compact: DeviceStyle
    wide: DeviceStyle


def _token_value(token: str, value: Any) -> Optional[str]:
    """Valeur canonique d'un token, ou None si inconnue."""
    v = safe_trim(value).lower()
    v = VALUE_ALIASES.get(token, {}).get(v, v)
    return v if v in STYLE_TABLE[token] else None


def _canonical_keys(raw: dict) -> Dict[str, Any]:
    """Applique TOKEN_ALIASES ; le nom canonique l'emporte sur l'alias."""
    out: Dict[str, Any] = {}
    for alias, token in TOKEN_ALIASES.items():
        if alias in raw and raw[alias] is not None:
            out.setdefault(token, raw[alias])
    for token in STYLE_TOKENS:
        if token in raw and raw[token] is not None:
            out[token] = raw[token]
    return out


def normalize_partial(raw: Any) -> Dict[str, str]:
    """Override partiel (mobile/desktop) : seuls les tokens connus et valides sont gardés."""
    out: Dict[str, str] = {}
    for token, value in _canonical_keys(as_obj(raw)).items():
        canonical = _token_value(token, value)
        if canonical is not None:
            out[token] = canonical
    return out


def normalize_base(raw: Any) -> Dict[str, str]:
    """Tokens de base complets : inconnus ou absents → DEFAULT_TOKENS."""
    base = dict(DEFAULT_TOKENS)
    base.update(normalize_partial(raw))
    return base


def resolve_style(raw_style: Any) -> ResolvedStyle:
    """Résout un style brut en descripteurs compact (mobile) et wide (desktop)."""
    raw = as_obj(raw_style)
    base = normalize_base(raw)
    compact = {**base, **normalize_partial(raw.get("mobile"))}
    wide = {**base, **normalize_partial(raw.get("desktop"))}
    return ResolvedStyle(compact=DeviceStyle(**compact), wide=DeviceStyle(**wide))


def effective_tokens(raw_style: Any, device: Literal["mobile", "desktop"]) -> Dict[str, str]:
    resolved = resolve_style(raw_style)
    return (resolved.compact if device == "mobile" else resolved.wide).tokens()


def frame_css(selector: str, resolved: ResolvedStyle, table: StyleTable = STYLE_TABLE) -> str:
    """Règle mobile-first + règle media query pour le descripteur wide."""
    return (
        f"{selector}{{{resolved.compact.css(table)}}}"
        f"@media (min-width:{WIDE_BREAKPOINT_PX}px){{{selector}{{{resolved.wide.css(table)}}}}}"
    )


# ── Presets (deltas appliqués sur le style existant) ────────────────────────

STYLE_PRESETS: Dict[str, Dict[str, str]] = {
    "card": {
        "background": "card",
        "border": "subtle",
        "radius": "2xl",
        "padding": "md",
        "width": "wide",
    },
    "minimal": {
        "background": "none",
        "border": "none",
        "radius": "none",
        "padding": "none",
        "width": "full",
    },
    "wide_section": {
        "width": "full",
        "padding": "md",
    },
    "centered": {
        "align": "center",
    },
    "hero_highlight": {
        "background": "highlight",
        "border": "strong",
        "radius": "2xl",
        "padding": "lg",
        "width": "full",
        "align": "center",
    },
}


def merge_style(prev: Any, patch: Any) -> Dict[str, Any]:
    """Fusionne un patch de style ; les overrides mobile/desktop existants sont conservés sauf écrasement."""
    p = dict(as_obj(prev))
    n = dict(as_obj(patch))
    return {
        **p,
        **n,
        "mobile": {**as_obj(p.get("mobile")), **as_obj(n.get("mobile"))},
        "desktop": {**as_obj(p.get("desktop")), **as_obj(n.get("desktop"))},
    }


def apply_style_preset(prev: Any, key: str) -> Dict[str, Any]:
    if key not in STYLE_PRESETS:
        raise ValueError(f"Preset de style inconnu : {key!r}. Presets : {list(STYLE_PRESETS)}")
    return merge_style(prev, STYLE_PRESETS[key])
