"""SQLite : init + session + CRUD helpers + SqlBlockStore"""
import json, logging, os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .blocks.products import PRODUCTS_LIMIT_MAX
from .core.fields import clamp_int, merge_hex
from .core.schemas import Block, ProductRecord, SiteContext
from .errors import BlockNotFoundError, PageNotFoundError, PersistenceError
from .models import Base, BlockDB, PageDB, ProductDB

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "page_blocks.db"))
ENGINE       = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=ENGINE)

# Colonnes couleur de PageDB → clé de SiteContext.colors
_COLOR_COLUMNS = ("bg_color", "text_color", "muted_color", "border_color", "button_color", "button_text_color")


def make_session_factory(db_path: str) -> sessionmaker:
    """Engine + sessionmaker dédiés (tests, outils)."""
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Optional[Engine] = None):
    engine = engine or ENGINE
    if engine is ENGINE:
        Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jo(s: Optional[str]) -> dict:
    try:
        v = json.loads(s or "{}")
    except (TypeError, ValueError):
        return {}
    return v if isinstance(v, dict) else {}

def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Page ──
def db_create_page(db: Session, obj: PageDB) -> PageDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_get_page(db: Session, page_id: str) -> Optional[PageDB]:
    return db.query(PageDB).filter_by(page_id=page_id).first()

def db_update_page(db: Session, page: PageDB, **kwargs) -> PageDB:
    for k, v in kwargs.items():
        setattr(page, k, v)
    db.commit(); db.refresh(page); return page


# ── Block ──
def db_create_block(db: Session, obj: BlockDB) -> BlockDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_get_block(db: Session, block_id: str) -> Optional[BlockDB]:
    return db.query(BlockDB).filter_by(block_id=block_id).first()

def db_list_blocks(db: Session, page_id: str) -> List[BlockDB]:
    return db.query(BlockDB).filter_by(page_id=page_id).order_by(BlockDB.position, BlockDB.block_id).all()

def db_update_block(db: Session, block: BlockDB, **kwargs) -> BlockDB:
    for k, v in kwargs.items():
        setattr(block, k, v)
    db.commit(); db.refresh(block); return block

def db_delete_block(db: Session, block: BlockDB):
    db.delete(block); db.commit()


# ── Product ──
def db_create_product(db: Session, obj: ProductDB) -> ProductDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_list_active_products(db: Session, page_id: str, limit: int = 60) -> List[ProductDB]:
    limit = clamp_int(limit, 1, PRODUCTS_LIMIT_MAX, 60)
    return (
        db.query(ProductDB)
        .filter_by(page_id=page_id, is_active=True)
        .order_by(ProductDB.sort_order.asc().nullsfirst(), ProductDB.updated_at.desc().nullsfirst())
        .limit(limit)
        .all()
    )


# ── Conversions ORM → schémas ──
def block_from_row(row: BlockDB) -> Block:
    style = jo(row.style) if row.style else None
    return Block(
        id=row.block_id,
        page_id=row.page_id,
        type=row.type,
        variant=row.variant,
        content=jo(row.content),
        style=style,
        anchor_id=row.anchor_id,
        order=row.position or 0,
        hidden=bool(row.hidden),
    )


def product_from_row(row: ProductDB) -> ProductRecord:
    return ProductRecord(
        id=row.product_id,
        page_id=row.page_id,
        title=row.title,
        subtitle=row.subtitle,
        description=row.description,
        image_url=row.image_url,
        external_url=row.external_url,
        currency=row.currency,
        price_cents=row.price_cents,
        compare_at_cents=row.compare_at_cents,
        is_active=bool(row.is_active),
        sort_order=row.sort_order,
        updated_at=row.updated_at,
    )


# Champs de Block → colonnes BlockDB
_BLOCK_COLUMNS: Dict[str, Callable[[Any], Any]] = {
    "type":      str,
    "variant":   lambda v: v,
    "content":   lambda v: jd(v or {}),
    "style":     lambda v: jd(v) if v is not None else None,
    "anchor_id": lambda v: v or None,
    "hidden":    bool,
}


class SqlBlockStore:
    """
    Store durable SQLAlchemy : BlockStore + ProductCatalog + SiteContextProvider.
    Toute SQLAlchemyError est convertie en PersistenceError (jamais retentée).
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def _fail(self, op: str, e: Exception):
        log.exception("SqlBlockStore.%s : %s", op, e)
        raise PersistenceError(f"{op} : {e}") from e

    def list_blocks(self, page_id: str) -> List[Block]:
        try:
            with self.session_factory() as db:
                return [block_from_row(r) for r in db_list_blocks(db, page_id)]
        except SQLAlchemyError as e:
            self._fail("list_blocks", e)

    def create_block(
        self, page_id: str, block_type: str, content: Dict[str, Any], order: int, variant: Optional[str] = None,
    ) -> Block:
        try:
            with self.session_factory() as db:
                row = db_create_block(db, BlockDB(
                    page_id=page_id, type=block_type, variant=variant,
                    content=jd(content or {}), position=order,
                ))
                return block_from_row(row)
        except SQLAlchemyError as e:
            self._fail("create_block", e)

    def update_block(self, block_id: str, **partial: Any) -> None:
        values = {}
        for key, value in partial.items():
            if key == "order":
                values["position"] = int(value)
            elif key in _BLOCK_COLUMNS:
                values[key] = _BLOCK_COLUMNS[key](value)
            else:
                raise ValueError(f"Champ de bloc non modifiable : {key!r}")
        values["updated_at"] = datetime.utcnow()
        try:
            with self.session_factory() as db:
                row = db_get_block(db, block_id)
                if not row:
                    raise BlockNotFoundError(block_id)
                db_update_block(db, row, **values)
        except SQLAlchemyError as e:
            self._fail("update_block", e)

    def delete_block(self, block_id: str) -> None:
        try:
            with self.session_factory() as db:
                row = db_get_block(db, block_id)
                if not row:
                    raise BlockNotFoundError(block_id)
                db_delete_block(db, row)
        except SQLAlchemyError as e:
            self._fail("delete_block", e)

    def list_active_products(self, page_id: str, limit: int = 60) -> List[ProductRecord]:
        try:
            with self.session_factory() as db:
                return [product_from_row(r) for r in db_list_active_products(db, page_id, limit)]
        except SQLAlchemyError as e:
            self._fail("list_active_products", e)

    def get_site_context(self, page_id: str) -> SiteContext:
        """Contexte de site en lecture seule ; page absente → défauts."""
        try:
            with self.session_factory() as db:
                page = db_get_page(db, page_id)
                if not page:
                    return SiteContext()
                return SiteContext.from_raw(
                    layout_width=page.layout_width,
                    button_style=page.button_style,
                    colors={c: getattr(page, c) for c in _COLOR_COLUMNS},
                )
        except SQLAlchemyError as e:
            self._fail("get_site_context", e)

    def save_site_colors(self, page_id: str, colors: Dict[str, Any]) -> Dict[str, bool]:
        """
        Applique des couleurs de thème saisies sur la page.

        Une saisie vide remet la couleur par défaut ; une saisie invalide conserve
        la couleur déjà enregistrée et est signalée à False dans la validité renvoyée.
        """
        unknown = [k for k in colors if k not in _COLOR_COLUMNS]
        if unknown:
            raise ValueError(f"Couleur de thème inconnue : {unknown[0]!r}")
        validity: Dict[str, bool] = {}
        try:
            with self.session_factory() as db:
                page = db_get_page(db, page_id)
                if not page:
                    raise PageNotFoundError(page_id)
                values = {}
                for key, raw in colors.items():
                    values[key], validity[key] = merge_hex(getattr(page, key), raw)
                db_update_page(db, page, **values)
        except SQLAlchemyError as e:
            self._fail("save_site_colors", e)
        log.info("page %s : couleurs de thème %s", page_id, validity)
        return validity

    def get_page_title(self, page_id: str) -> str:
        try:
            with self.session_factory() as db:
                page = db_get_page(db, page_id)
                return page.title if page else ""
        except SQLAlchemyError as e:
            self._fail("get_page_title", e)
