"""
Base des contenus de blocs.
Chaque type définit un modèle de contenu canonique + une fonction normalize_<type>(raw).
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class BlockContent(BaseModel):
    """Contenu canonique d'un bloc (après validation/défauts)."""
    pass


class GenericContent(BlockContent):
    """Contenu laissé tel quel (divider, types inconnus)."""
    model_config = ConfigDict(extra="allow")


class NormalizedContent(BaseModel):
    """
    Résultat d'une normalisation.

    field_validity : drapeau par champ interactif (affichage inline dans l'éditeur)
    warnings       : fragments écartés à signaler (ex. ligne de lien partielle)
    errors         : champs qui bloquent la sauvegarde (valeur non vide mais illisible)
    """
    content: BlockContent
    field_validity: Dict[str, bool] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def can_save(self) -> bool:
        return not self.errors
