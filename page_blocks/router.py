"""
Router FastAPI : endpoints page_blocks.

GET    /pages/{page_id}                              → HTML public (blocs masqués exclus)
GET    /pages/{page_id}/blocks                       → liste éditeur (tous les blocs)
POST   /pages/{page_id}/blocks                       → {type, index} → insertion
POST   /pages/{page_id}/blocks/{block_id}/move       → {index}
PATCH  /pages/{page_id}/blocks/{block_id}/visibility → {hidden}
PATCH  /pages/{page_id}/blocks/{block_id}            → {content?, style?, preset?, variant?, anchor_id?}
DELETE /pages/{page_id}/blocks/{block_id}
PATCH  /pages/{page_id}/theme                        → {bg_color?, text_color?, …} couleurs de thème

POST   /normalize/{block_type}  → contenu brut → contenu canonique + validité des champs
POST   /style/resolve           → style brut → descripteurs compact / wide
GET    /catalog                 → types de blocs + JSON schemas + presets de style
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from .blocks import CONTENT_MODELS, normalize
from .composer import PageComposer
from .core.schemas import BLOCK_TYPES
from .core.style import STYLE_PRESETS, resolve_style
from .database import SqlBlockStore
from .errors import BlockNotFoundError, ContentValidationError, PageNotFoundError, PersistenceError
from .renderer.registry import DEFAULT_REGISTRY

log = logging.getLogger(__name__)

router = APIRouter(prefix="/pages", tags=["page_blocks"])
tools_router = APIRouter(tags=["page_blocks"])


def get_store() -> SqlBlockStore:
    return SqlBlockStore()


def _composer(page_id: str, store: SqlBlockStore) -> PageComposer:
    return PageComposer(store, page_id)


@contextmanager
def _http_errors() -> Iterator[None]:
    """Erreurs moteur → HTTPException."""
    try:
        yield
    except (BlockNotFoundError, PageNotFoundError) as e:
        raise HTTPException(404, str(e))
    except ContentValidationError as e:
        raise HTTPException(422, {
            "errors": e.errors,
            "field_validity": e.field_validity,
            "warnings": e.warnings,
        })
    except PersistenceError as e:
        log.error("persistance : %s", e)
        raise HTTPException(503, f"Échec de persistance : {e}")


# ── Requêtes ────────────────────────────────────────────────────────────────

class InsertRequest(BaseModel):
    type: str
    index: int = 0


class MoveRequest(BaseModel):
    index: int


class VisibilityRequest(BaseModel):
    hidden: bool


class BlockPatchRequest(BaseModel):
    content:   Optional[Dict[str, Any]] = None
    style:     Optional[Dict[str, Any]] = None
    preset:    Optional[str]            = None
    variant:   Optional[str]            = None
    anchor_id: Optional[str]            = None


# ── Pages ───────────────────────────────────────────────────────────────────

@router.get("/{page_id}", response_class=HTMLResponse, summary="Rend la page publique")
def public_page(page_id: str, store: SqlBlockStore = Depends(get_store)) -> HTMLResponse:
    with _http_errors():
        composer = _composer(page_id, store)
        html = composer.render_page(title=store.get_page_title(page_id))
    return HTMLResponse(content=html)


@router.get("/{page_id}/blocks", summary="Liste éditeur des blocs")
def list_blocks(page_id: str, store: SqlBlockStore = Depends(get_store)) -> dict:
    with _http_errors():
        composer = _composer(page_id, store)
        blocks = composer.engine.load()
    return {
        "page_id": page_id,
        "dense":   composer.engine.is_dense(),
        "blocks":  [b.model_dump() for b in blocks],
    }


@router.post("/{page_id}/blocks", status_code=201, summary="Insère un bloc à l'index donné")
def insert_block(page_id: str, req: InsertRequest, store: SqlBlockStore = Depends(get_store)) -> dict:
    if req.type not in BLOCK_TYPES:
        raise HTTPException(422, f"Type de bloc inconnu : {req.type!r}")
    with _http_errors():
        composer = _composer(page_id, store)
        block = composer.insert_at(req.index, req.type)
        return {"block": block.model_dump(), "blocks": [b.model_dump() for b in composer.blocks]}


@router.post("/{page_id}/blocks/{block_id}/move", summary="Déplace un bloc")
def move_block(page_id: str, block_id: str, req: MoveRequest, store: SqlBlockStore = Depends(get_store)) -> dict:
    with _http_errors():
        composer = _composer(page_id, store)
        changed = composer.move_to(block_id, req.index)
        return {"changed": [b.id for b in changed], "blocks": [b.model_dump() for b in composer.blocks]}


@router.patch("/{page_id}/blocks/{block_id}/visibility", summary="Masque / affiche un bloc")
def set_visibility(page_id: str, block_id: str, req: VisibilityRequest, store: SqlBlockStore = Depends(get_store)) -> dict:
    with _http_errors():
        block = _composer(page_id, store).set_hidden(block_id, req.hidden)
    return {"block": block.model_dump()}


@router.patch("/{page_id}/blocks/{block_id}", summary="Modifie contenu / style / variante / ancre")
def patch_block(page_id: str, block_id: str, req: BlockPatchRequest, store: SqlBlockStore = Depends(get_store)) -> dict:
    validity: Dict[str, bool] = {}
    warnings = []
    with _http_errors():
        composer = _composer(page_id, store)
        if req.content is not None:
            raw = dict(req.content)
            if req.variant:
                raw["variant"] = req.variant
            result = composer.save_content(block_id, raw)
            validity, warnings = result.field_validity, result.warnings
        elif req.variant:
            result = composer.set_variant(block_id, req.variant)
            validity, warnings = result.field_validity, result.warnings
        if req.style is not None:
            composer.save_style(block_id, req.style)
        if req.preset:
            try:
                composer.apply_preset(block_id, req.preset)
            except ValueError as e:
                raise HTTPException(422, str(e))
        if req.anchor_id is not None:
            composer.set_anchor(block_id, req.anchor_id)
        block = composer.engine.get(block_id)
    return {"block": block.model_dump(), "field_validity": validity, "warnings": warnings}


@router.delete("/{page_id}/blocks/{block_id}", summary="Supprime un bloc")
def delete_block(page_id: str, block_id: str, store: SqlBlockStore = Depends(get_store)) -> dict:
    with _http_errors():
        composer = _composer(page_id, store)
        composer.remove(block_id)
        return {"deleted": block_id, "blocks": [b.model_dump() for b in composer.blocks]}


@router.patch("/{page_id}/theme", summary="Modifie les couleurs de thème de la page")
def patch_theme(page_id: str, colors: Dict[str, Any] = Body(default={}), store: SqlBlockStore = Depends(get_store)) -> dict:
    with _http_errors():
        try:
            validity = store.save_site_colors(page_id, colors)
        except ValueError as e:
            raise HTTPException(422, str(e))
        ctx = store.get_site_context(page_id)
    return {"field_validity": validity, "colors": ctx.colors}


# ── Outils (sans store) ─────────────────────────────────────────────────────

@tools_router.post("/normalize/{block_type}", summary="Normalise un contenu brut")
def normalize_content(block_type: str, raw: Dict[str, Any] = Body(default={})) -> dict:
    result = normalize(block_type, raw)
    return {
        "content":        result.content.model_dump(),
        "field_validity": result.field_validity,
        "warnings":       result.warnings,
        "errors":         result.errors,
        "can_save":       result.can_save,
    }


@tools_router.post("/style/resolve", summary="Résout un style brut")
def resolve(raw: Dict[str, Any] = Body(default={})) -> dict:
    return resolve_style(raw).model_dump()


@tools_router.get("/catalog", summary="Liste les blocs disponibles et leurs schemas")
def catalog() -> JSONResponse:
    """Retourne le catalogue des types de blocs avec leurs JSON schemas Pydantic."""
    catalog_data = []
    for block_type in DEFAULT_REGISTRY.types():
        catalog_data.append({
            "block_type": block_type,
            "title":      DEFAULT_REGISTRY.title(block_type),
            "schema":     CONTENT_MODELS[block_type].model_json_schema(),
        })
    return JSONResponse({"blocks": catalog_data, "style_presets": STYLE_PRESETS})
