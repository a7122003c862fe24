"""SQLAlchemy ORM models for users, their items and cross-user favorites.

Meals and restaurants share the columns the favorites subsystem relies on
(``user_id`` as the owner and the inline ``is_favorite`` flag) through
:class:`ItemColumnsMixin`. Bookmarks on items owned by somebody else live in
``user_favorites`` instead, one row per ``(user_id, item_type, item_id)``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from whattoeat.schemas.items import ItemType


def utcnow() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class ItemColumnsMixin:
    """Columns shared by every favoritable item."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owner of the item. Never changes after creation.",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cuisine_type: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="0",
        doc=(
            "Favorite flag as seen by the owner only. Other viewers are"
            " resolved through ``user_favorites``."
        ),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def owner_id(self) -> int:
        return self.user_id


class Meal(ItemColumnsMixin, Base):
    __tablename__ = "meals"
    __table_args__ = (
        CheckConstraint(
            "difficulty_level IN ('easy', 'medium', 'hard')",
            name="ck_meals_difficulty_level",
        ),
    )

    item_type: ClassVar[ItemType] = ItemType.MEAL

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty_level: Mapped[str | None] = mapped_column(String(16), nullable=True)
    prep_time: Mapped[int | None] = mapped_column(
        Integer, nullable=True, doc="Preparation time in minutes"
    )


class Restaurant(ItemColumnsMixin, Base):
    __tablename__ = "restaurants"
    __table_args__ = (
        CheckConstraint(
            "price_range IN ('$', '$$', '$$$', '$$$$')",
            name="ck_restaurants_price_range",
        ),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_restaurants_rating"),
    )

    item_type: ClassVar[ItemType] = ItemType.RESTAURANT

    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    price_range: Mapped[str | None] = mapped_column(String(4), nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)


ITEM_MODELS: dict[ItemType, type[Meal] | type[Restaurant]] = {
    ItemType.MEAL: Meal,
    ItemType.RESTAURANT: Restaurant,
}


class UserFavorite(Base):
    """A viewer's bookmark on an item owned by another user."""

    __tablename__ = "user_favorites"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "item_type",
            "item_id",
            name="uq_user_favorites_user_item",
        ),
        CheckConstraint(
            "item_type IN ('meal', 'restaurant')",
            name="ck_user_favorites_item_type",
        ),
        Index("ix_user_favorites_user_type_created", "user_id", "item_type", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_type: Mapped[str] = mapped_column(String(16), nullable=False)
    item_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Primary key in ``meals`` or ``restaurants`` depending on ``item_type``.",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
