# closetai/models/database/wardrobe.py
"""Wardrobe item model.

Rows are owned by the wardrobe service; the recommendation engine only reads
them.
"""

from typing import List, Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Float, Integer, Boolean, JSON, Index
from .base import Base, enum_column
from closetai.models.domain.common import ItemCategory, ItemColor, Season

class WardrobeItem(Base):
    """A single garment or accessory in a user's wardrobe."""
    __tablename__ = 'wardrobe_items'

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[ItemCategory] = mapped_column(
        enum_column(ItemCategory),
        nullable=False
    )
    color: Mapped[ItemColor] = mapped_column(
        enum_column(ItemColor),
        nullable=False
    )
    season: Mapped[Season] = mapped_column(
        enum_column(Season),
        default=Season.ALL_SEASON,
        nullable=False
    )
    occasions: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    wear_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index('idx_wardrobe_user_active', 'user_id', 'is_active'),
    )
