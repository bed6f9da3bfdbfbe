"""
Protocols des collaborateurs externes du moteur (store durable, catalogue produits, contexte de site).
SqlBlockStore (database.py) les implémente tous les trois.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ..core.schemas import Block, ProductRecord, SiteContext


@runtime_checkable
class BlockStore(Protocol):
    def list_blocks(self, page_id: str) -> List[Block]: ...
    def create_block(
        self, page_id: str, block_type: str, content: Dict[str, Any], order: int, variant: Optional[str] = None,
    ) -> Block: ...
    def update_block(self, block_id: str, **partial: Any) -> None: ...
    def delete_block(self, block_id: str) -> None: ...


@runtime_checkable
class ProductCatalog(Protocol):
    def list_active_products(self, page_id: str, limit: int) -> List[ProductRecord]: ...


@runtime_checkable
class SiteContextProvider(Protocol):
    def get_site_context(self, page_id: str) -> SiteContext: ...
