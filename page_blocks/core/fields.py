"""
Primitives partagées par les normaliseurs : trim, URL, couleurs hex, bornes numériques, ancres.

Toutes les fonctions sont totales : aucune ne lève sur une entrée mal formée.
"""
import json
import math
import re
from typing import Any, Iterable, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel

# Préfixes conservés tels quels par normalize_url (ancres, chemins relatifs, schémas non-http)
PASSTHROUGH_PREFIXES = ("#", "/")
PASSTHROUGH_SCHEMES = ("mailto:", "tel:", "sms:")

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_HOST_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*$")
_HEX6_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_HEX3_RE = re.compile(r"^#[0-9a-fA-F]{3}$")


def safe_trim(value: Any) -> str:
    """Chaîne trimée ; None/objets → "" ; nombres → leur représentation."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value).strip()
    return ""


def as_obj(value: Any) -> dict:
    """Contenu brut → dict. Accepte dict, modèle pydantic ou JSON sérialisé ; sinon {}."""
    if isinstance(value, dict):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, str) and value.strip():
        try:
            parsed = json.loads(value)
        except ValueError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def choice(value: Any, allowed: Iterable[str], default: str) -> str:
    """Valeur d'énumération : retenue si connue (insensible à la casse), sinon défaut."""
    v = safe_trim(value).lower()
    return v if v in allowed else default


def as_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return value != 0
    v = safe_trim(value).lower()
    if v in ("true", "1", "yes", "on"):
        return True
    if v in ("false", "0", "no", "off"):
        return False
    return default


# ── URL ──────────────────────────────────────────────────────────────────────

def is_passthrough_url(url: str) -> bool:
    """Ancre, chemin relatif ou schéma non-http : normalisé mais hors contrôle http(s)."""
    return url.startswith(PASSTHROUGH_PREFIXES) or url.lower().startswith(PASSTHROUGH_SCHEMES)


def normalize_url(value: Any) -> str:
    """
    Normalisation best-effort des champs URL.

    "" → "" ; "#top", "/about", "mailto:…", "tel:…", "sms:…" → inchangés ;
    "https://a.com" → inchangé ; "t.me/x" → "https://t.me/x".
    """
    v = safe_trim(value)
    if not v:
        return ""
    if is_passthrough_url(v):
        return v
    if _SCHEME_RE.match(v):
        return v
    return f"https://{v}"


def is_valid_http_url(value: Any) -> bool:
    """URL bien formée avec schéma http ou https et un hôte."""
    v = safe_trim(value)
    if not v or any(ch.isspace() for ch in v):
        return False
    try:
        parts = urlsplit(v)
        host = parts.hostname
        parts.port  # lève ValueError si le port est invalide
    except ValueError:
        return False
    if parts.scheme.lower() not in ("http", "https") or not host:
        return False
    if host.startswith("[") or ":" in host:
        return True  # IPv6 déjà validé par urlsplit
    return bool(_HOST_RE.match(host))


def is_acceptable_link(url: str) -> bool:
    """Cible de lien acceptable : passthrough (ancre, relatif, mailto…) ou http(s) valide."""
    if not url:
        return False
    return is_passthrough_url(url) or is_valid_http_url(url)


def is_external_link(url: str) -> bool:
    return bool(re.match(r"^https?://", url, re.IGNORECASE)) or url.lower().startswith(PASSTHROUGH_SCHEMES)


# ── Couleurs hex ─────────────────────────────────────────────────────────────

def normalize_hex_or_none(value: Any) -> Optional[str]:
    """
    "#fff" → "#ffffff", "#ABCDEF" → "#abcdef", "abc" → "#aabbcc".
    Vide ou invalide → None ("utiliser le défaut") ; voir merge_hex pour distinguer les deux.
    """
    v = safe_trim(value)
    if not v:
        return None
    s = v if v.startswith("#") else f"#{v}"
    if _HEX6_RE.match(s):
        return s.lower()
    if _HEX3_RE.match(s):
        r, g, b = s[1], s[2], s[3]
        return f"#{r}{r}{g}{g}{b}{b}".lower()
    return None


def merge_hex(previous: Optional[str], value: Any) -> Tuple[Optional[str], bool]:
    """
    Applique une saisie de couleur sur la valeur précédente.

    Returns:
        (valeur retenue, saisie valide). Une saisie invalide conserve `previous`.
    """
    if not safe_trim(value):
        return None, True
    normalized = normalize_hex_or_none(value)
    if normalized is None:
        return previous, False
    return normalized, True


# ── Nombres ──────────────────────────────────────────────────────────────────

def clamp_int(value: Any, lo: int, hi: int, fallback: int) -> int:
    """Entier borné dans [lo, hi] ; `fallback` si l'entrée n'est pas un nombre."""
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return max(lo, min(hi, value))
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if math.isnan(n):
        return fallback
    if math.isinf(n):
        return hi if n > 0 else lo
    return max(lo, min(hi, int(math.floor(n))))


# ── Ancres ───────────────────────────────────────────────────────────────────

def normalize_anchor_id(value: Any) -> str:
    """
    Identifiant d'ancre : lettres, chiffres, "_" et "-".
    "#Mon Titre!" → "mon-titre" ; "2024 news" → "s-2024-news".
    """
    raw = safe_trim(value).lower().lstrip("#")
    cleaned = re.sub(r"\s+", "-", raw)
    cleaned = re.sub(r"[^a-z0-9_-]", "-", cleaned)
    cleaned = re.sub(r"-+", "-", cleaned).strip("-")
    if not cleaned:
        return ""
    if cleaned[0].isdigit():
        return f"s-{cleaned}"
    return cleaned
