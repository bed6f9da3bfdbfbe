"""
Data models : Page, Block, Product
SQLAlchemy (SQLite) ; contenu et style stockés en JSON (Text)
"""
import uuid
from datetime import datetime
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class PageDB(Base):
    __tablename__ = "pages"
    page_id:           Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title:             Mapped[str]           = mapped_column(sa.String, default="")
    layout_width:      Mapped[str]           = mapped_column(sa.String, default="compact")
    button_style:      Mapped[str]           = mapped_column(sa.String, default="solid")
    bg_color:          Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    text_color:        Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    muted_color:       Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    border_color:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    button_color:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    button_text_color: Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    created_at:        Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow)

    blocks:   Mapped[List["BlockDB"]]   = relationship("BlockDB",   back_populates="page", cascade="all, delete-orphan")
    products: Mapped[List["ProductDB"]] = relationship("ProductDB", back_populates="page", cascade="all, delete-orphan")


class BlockDB(Base):
    __tablename__ = "blocks"
    block_id:   Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    page_id:    Mapped[str]           = mapped_column(sa.String, sa.ForeignKey("pages.page_id"), nullable=False, index=True)
    type:       Mapped[str]           = mapped_column(sa.String, nullable=False)
    variant:    Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    content:    Mapped[str]           = mapped_column(sa.Text, default="{}")
    style:      Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    position:   Mapped[int]           = mapped_column(sa.Integer, default=0)
    hidden:     Mapped[bool]          = mapped_column(sa.Boolean, default=False)
    anchor_id:  Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    created_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    page: Mapped["PageDB"] = relationship("PageDB", back_populates="blocks")


class ProductDB(Base):
    __tablename__ = "products"
    product_id:       Mapped[str]                = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    page_id:          Mapped[str]                = mapped_column(sa.String, sa.ForeignKey("pages.page_id"), nullable=False, index=True)
    title:            Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    subtitle:         Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    description:      Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    image_url:        Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    external_url:     Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    currency:         Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    price_cents:      Mapped[Optional[int]]      = mapped_column(sa.Integer, nullable=True)
    compare_at_cents: Mapped[Optional[int]]      = mapped_column(sa.Integer, nullable=True)
    is_active:        Mapped[bool]               = mapped_column(sa.Boolean, default=True)
    sort_order:       Mapped[Optional[int]]      = mapped_column(sa.Integer, nullable=True)
    updated_at:       Mapped[Optional[datetime]] = mapped_column(sa.DateTime, nullable=True, default=datetime.utcnow)

    page: Mapped["PageDB"] = relationship("PageDB", back_populates="products")
