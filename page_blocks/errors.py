"""Erreurs du moteur de blocs."""
from typing import Dict, List, Optional


class PersistenceError(RuntimeError):
    """Échec d'écriture/lecture côté store durable (jamais retenté automatiquement)."""


class BlockNotFoundError(KeyError):
    """Bloc inconnu pour la page courante."""

    def __init__(self, block_id: str):
        super().__init__(block_id)
        self.block_id = block_id

    def __str__(self) -> str:
        return f"Bloc introuvable : {self.block_id}"


class PageNotFoundError(KeyError):
    """Page inconnue."""

    def __init__(self, page_id: str):
        super().__init__(page_id)
        self.page_id = page_id

    def __str__(self) -> str:
        return f"Page introuvable : {self.page_id}"


class ContentValidationError(ValueError):
    """Sauvegarde bloquée : le contenu dérivé serait invalide (ex. URL non vide mais illisible)."""

    def __init__(
        self,
        block_type: str,
        errors: List[str],
        field_validity: Optional[Dict[str, bool]] = None,
        warnings: Optional[List[str]] = None,
    ):
        self.block_type = block_type
        self.errors = list(errors)
        self.field_validity = dict(field_validity or {})
        self.warnings = list(warnings or [])
        super().__init__(f"Contenu {block_type!r} invalide : {', '.join(self.errors)}")
