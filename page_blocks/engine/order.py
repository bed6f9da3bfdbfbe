"""
OrderEngine : ordre des blocs d'une page.

Deux listes :
  - `blocks`    : liste optimiste, mise à jour avant toute écriture
  - canonique   : ce que renvoie le store ; rechargée (reload) dès qu'une écriture échoue

Invariant après chaque opération réussie : les `order` valent exactement 1..N,
dans l'ordre de la liste. move_to() est le seul producteur de valeurs d'ordre.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Tuple

from ..blocks import default_content, default_variant
from ..core.schemas import Block
from ..errors import BlockNotFoundError, PersistenceError
from .store import BlockStore

log = logging.getLogger(__name__)


def renumber(blocks: List[Block]) -> Tuple[List[Block], List[Block]]:
    """Renumérote 1..N. Retourne (liste renumérotée, blocs dont l'ordre a changé)."""
    out, changed = [], []
    for pos, b in enumerate(blocks, start=1):
        if b.order != pos:
            b = b.model_copy(update={"order": pos})
            changed.append(b)
        out.append(b)
    return out, changed


class OrderEngine:
    def __init__(self, store: BlockStore, page_id: str):
        self.store = store
        self.page_id = page_id
        self.blocks: List[Block] = []
        self._loaded = False

    # ── Lecture ──────────────────────────────────────────────────────────────

    def load(self) -> List[Block]:
        """Charge la liste canonique, triée par (order, id) pour départager les doublons."""
        rows = sorted(self.store.list_blocks(self.page_id), key=lambda b: (b.order, b.id))
        orders = [b.order for b in rows]
        if len(set(orders)) != len(orders):
            log.warning("page %s : ordres en double %s (départage par id)", self.page_id, orders)
        self.blocks = rows
        self._loaded = True
        return list(rows)

    def reload(self) -> List[Block]:
        """Réconciliation : l'état optimiste est abandonné au profit du store."""
        log.warning("page %s : rechargement de la liste canonique", self.page_id)
        return self.load()

    def ensure_loaded(self) -> List[Block]:
        return self.blocks if self._loaded else self.load()

    def is_dense(self) -> bool:
        return [b.order for b in self.blocks] == list(range(1, len(self.blocks) + 1))

    def get(self, block_id: str) -> Block:
        i = self._index_of(block_id)  # charge la liste avant de l'indexer
        return self.blocks[i]

    def _index_of(self, block_id: str) -> int:
        self.ensure_loaded()
        for i, b in enumerate(self.blocks):
            if b.id == block_id:
                return i
        raise BlockNotFoundError(block_id)

    # ── Écriture ─────────────────────────────────────────────────────────────

    @contextmanager
    def reconciling(self, op: str) -> Iterator[None]:
        """Toute exception du store → reload puis PersistenceError."""
        try:
            yield
        except BlockNotFoundError:
            self._safe_reload()
            raise
        except Exception as e:
            log.error("page %s : échec %s (%s)", self.page_id, op, e)
            self._safe_reload()
            if isinstance(e, PersistenceError):
                raise
            raise PersistenceError(f"{op} : {e}") from e

    def _safe_reload(self) -> None:
        try:
            self.reload()
        except Exception:
            # store indisponible : l'erreur d'origine est remontée par l'appelant
            log.exception("page %s : rechargement impossible", self.page_id)
            self.blocks = []
            self._loaded = False

    def _commit_order(self, new_blocks: List[Block], changed: List[Block], op: str) -> List[Block]:
        self.blocks = new_blocks
        with self.reconciling(op):
            for b in changed:
                self.store.update_block(b.id, order=b.order)
        if changed:
            log.info("page %s : %s, %d ordre(s) écrit(s)", self.page_id, op, len(changed))
        return changed

    def move_to(self, block_id: str, target_index: int) -> List[Block]:
        """Déplace un bloc à l'index cible (borné à [0, N-1]) et renumérote. Retourne les blocs réécrits."""
        i = self._index_of(block_id)
        lst = list(self.blocks)
        item = lst.pop(i)
        target = max(0, min(int(target_index), len(lst)))
        lst.insert(target, item)
        new_blocks, changed = renumber(lst)
        return self._commit_order(new_blocks, changed, f"move {block_id} → {target}")

    def insert_at(self, index: int, block_type: str) -> Block:
        """Crée un bloc (contenu par défaut, ordre max+1) puis le place à l'index demandé."""
        self.ensure_loaded()
        next_order = max((b.order for b in self.blocks), default=0) + 1
        with self.reconciling(f"create {block_type}"):
            created = self.store.create_block(
                self.page_id, block_type, default_content(block_type), next_order,
                variant=default_variant(block_type),
            )
        log.info("page %s : bloc %s créé (%s)", self.page_id, created.id, block_type)
        self.blocks = self.blocks + [created]
        self.move_to(created.id, index)
        return self.get(created.id)

    def remove(self, block_id: str) -> List[Block]:
        """Supprime un bloc puis renumérote les suivants."""
        i = self._index_of(block_id)
        lst = list(self.blocks)
        lst.pop(i)
        self.blocks = lst
        with self.reconciling(f"delete {block_id}"):
            self.store.delete_block(block_id)
        log.info("page %s : bloc %s supprimé", self.page_id, block_id)
        new_blocks, changed = renumber(lst)
        return self._commit_order(new_blocks, changed, f"renumber after delete {block_id}")

    def update(self, block_id: str, **partial: Any) -> Block:
        """Mise à jour hors ordre (contenu, style, variante, ancre, visibilité)."""
        if "order" in partial:
            raise ValueError("order ne se modifie que via move_to()")
        i = self._index_of(block_id)
        updated = self.blocks[i].model_copy(update=partial)
        lst = list(self.blocks)
        lst[i] = updated
        self.blocks = lst
        with self.reconciling(f"update {block_id}"):
            self.store.update_block(block_id, **partial)
        log.info("page %s : bloc %s mis à jour (%s)", self.page_id, block_id, ", ".join(partial))
        return updated

    def set_hidden(self, block_id: str, hidden: bool) -> Block:
        return self.update(block_id, hidden=bool(hidden))

    def repair(self) -> List[Block]:
        """Renumérote une liste non dense (trous, doublons) et persiste."""
        self.ensure_loaded()
        new_blocks, changed = renumber(self.blocks)
        return self._commit_order(new_blocks, changed, "repair")
