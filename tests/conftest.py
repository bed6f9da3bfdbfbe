"""Fixtures partagées : store en mémoire (enregistre chaque écriture) + store SQLite temporaire."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import uuid
from typing import Any, Dict, List, Optional

import pytest

from page_blocks.core.schemas import Block, ProductRecord, SiteContext
from page_blocks.errors import BlockNotFoundError


class MemoryStore:
    """BlockStore en mémoire ; `writes` garde la trace des update_block (id, partial)."""

    def __init__(self):
        self.rows: Dict[str, Block] = {}
        self.writes: List[tuple] = []
        self.products: List[ProductRecord] = []
        self.context = SiteContext()
        self.fail_on: Optional[str] = None

    def _maybe_fail(self, op: str):
        if self.fail_on == op:
            raise ConnectionError(f"{op} indisponible")

    def seed(self, page_id: str, types: List[str], orders: Optional[List[int]] = None) -> List[Block]:
        blocks = []
        for i, t in enumerate(types):
            b = Block(id=f"{t}-{i}", page_id=page_id, type=t, order=(orders[i] if orders else i + 1))
            self.rows[b.id] = b
            blocks.append(b)
        return blocks

    def list_blocks(self, page_id: str) -> List[Block]:
        self._maybe_fail("list_blocks")
        return [b for b in self.rows.values() if b.page_id == page_id]

    def create_block(self, page_id: str, block_type: str, content: Dict[str, Any], order: int, variant: Optional[str] = None) -> Block:
        self._maybe_fail("create_block")
        b = Block(id=f"new-{uuid.uuid4().hex[:8]}", page_id=page_id, type=block_type,
                  content=content, order=order, variant=variant)
        self.rows[b.id] = b
        return b

    def update_block(self, block_id: str, **partial: Any) -> None:
        self._maybe_fail("update_block")
        if block_id not in self.rows:
            raise BlockNotFoundError(block_id)
        self.writes.append((block_id, partial))
        self.rows[block_id] = self.rows[block_id].model_copy(update=partial)

    def delete_block(self, block_id: str) -> None:
        self._maybe_fail("delete_block")
        if block_id not in self.rows:
            raise BlockNotFoundError(block_id)
        del self.rows[block_id]

    def list_active_products(self, page_id: str, limit: int) -> List[ProductRecord]:
        return [p for p in self.products if p.page_id == page_id and p.is_active][:limit]

    def get_site_context(self, page_id: str) -> SiteContext:
        return self.context

    def orders(self, page_id: str = "p1") -> List[tuple]:
        rows = sorted(self.list_blocks(page_id), key=lambda b: (b.order, b.id))
        return [(b.type, b.order) for b in rows]


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_store(tmp_path):
    """SqlBlockStore sur une base SQLite temporaire."""
    from page_blocks.database import SqlBlockStore, make_session_factory
    return SqlBlockStore(make_session_factory(str(tmp_path / "test.db")))
