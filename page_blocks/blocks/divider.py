"""Bloc Divider : aucun champ de contenu ; normalisation identité."""
from typing import Any

from ..core.fields import as_obj
from .base import GenericContent, NormalizedContent


class DividerContent(GenericContent):
    pass


def normalize_divider(raw: Any) -> NormalizedContent:
    # identité : les clés éventuelles (ex. {"style": "line"}) sont conservées telles quelles
    data = {k: v for k, v in as_obj(raw).items() if isinstance(k, str)}
    return NormalizedContent(content=DividerContent.model_validate(data))
