# closetai/models/database/recommendation.py
"""Recommendation and RecommendationItem models.

A recommendation is the only entity the engine owns. It is valid for a fixed
seven days after creation; afterwards it is hidden from every active query
and eventually purged by the maintenance cleanup.
"""

from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy import (
    String, Float, Integer, Boolean, DateTime, JSON, ForeignKey, Index,
    event, inspect,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from .base import Base, enum_column, utcnow, as_utc
from closetai.core.exceptions import ValidationError
from closetai.models.domain.common import (
    Algorithm, ItemPosition, Occasion, RecommendationType, Season, TimeOfDay,
)

# Fixed validity window, not configurable per record
RECOMMENDATION_TTL = timedelta(days=7)

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
REASONING_MAX_LENGTH = 300
REASON_MAX_LENGTH = 200
COMMENTS_MAX_LENGTH = 200


def _bounded_text(field: str, value: Optional[str], max_length: int) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(
            f"{field} cannot exceed {max_length} characters",
            field=field
        )
    return value


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class RecommendationItem(Base):
    """A wardrobe item referenced by a recommendation."""
    __tablename__ = 'recommendation_items'

    recommendation_id: Mapped[int] = mapped_column(
        ForeignKey('recommendations.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    wardrobe_item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    confidence: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(REASON_MAX_LENGTH), nullable=True)
    position: Mapped[ItemPosition] = mapped_column(
        enum_column(ItemPosition),
        default=ItemPosition.PRIMARY,
        nullable=False
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    recommendation: Mapped["Recommendation"] = relationship(back_populates="items")

    @validates('confidence')
    def validate_confidence(self, key, value):
        if value is None or not 0 <= value <= 1:
            raise ValidationError("Item confidence must be between 0 and 1", field="items.confidence")
        return value

    @validates('reason')
    def validate_reason(self, key, value):
        return _bounded_text("items.reason", value, REASON_MAX_LENGTH)


class Recommendation(Base):
    """A persisted, scored outfit or style suggestion."""
    __tablename__ = 'recommendations'

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    type: Mapped[RecommendationType] = mapped_column(
        enum_column(RecommendationType),
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    reasoning: Mapped[Optional[str]] = mapped_column(String(REASONING_MAX_LENGTH), nullable=True)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)

    # Context
    occasion: Mapped[Optional[Occasion]] = mapped_column(enum_column(Occasion), nullable=True)
    weather_temperature: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    weather_conditions: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    season: Mapped[Optional[Season]] = mapped_column(enum_column(Season), nullable=True)
    time_of_day: Mapped[Optional[TimeOfDay]] = mapped_column(enum_column(TimeOfDay), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    style_tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)

    # Color scheme
    color_primary: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    color_secondary: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    color_accent: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    color_neutral: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Feedback
    feedback_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    feedback_liked: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    feedback_used: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    feedback_comments: Mapped[Optional[str]] = mapped_column(String(COMMENTS_MAX_LENGTH), nullable=True)
    feedback_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Metadata
    algorithm: Mapped[Optional[Algorithm]] = mapped_column(enum_column(Algorithm), nullable=True)
    version: Mapped[str] = mapped_column(String(10), default="1.0", nullable=False)
    processing_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    data_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    items: Mapped[List[RecommendationItem]] = relationship(
        back_populates="recommendation",
        cascade="all, delete-orphan",
        order_by=RecommendationItem.sort_order,
        collection_class=ordering_list('sort_order'),
        lazy="selectin"
    )

    __table_args__ = (
        Index('idx_recommendation_user_type', 'user_id', 'type'),
        Index('idx_recommendation_user_confidence', 'user_id', 'confidence'),
        Index('idx_recommendation_user_active', 'user_id', 'is_active'),
    )

    @validates('confidence')
    def validate_confidence(self, key, value):
        if value is None:
            raise ValidationError("Confidence score is required", field="confidence")
        return clamp_confidence(value)

    @validates('title')
    def validate_title(self, key, value):
        value = _bounded_text("title", value, TITLE_MAX_LENGTH)
        if not value:
            raise ValidationError("Title is required", field="title")
        return value

    @validates('description')
    def validate_description(self, key, value):
        return _bounded_text("description", value, DESCRIPTION_MAX_LENGTH)

    @validates('reasoning')
    def validate_reasoning(self, key, value):
        return _bounded_text("reasoning", value, REASONING_MAX_LENGTH)

    @validates('feedback_comments')
    def validate_comments(self, key, value):
        return _bounded_text("feedback.comments", value, COMMENTS_MAX_LENGTH)

    @validates('feedback_rating')
    def validate_rating(self, key, value):
        if value is not None and not 1 <= value <= 5:
            raise ValidationError("Rating must be between 1 and 5", field="feedback.rating")
        return value

    @validates('style_tags')
    def validate_style_tags(self, key, value):
        tags = []
        for tag in value or []:
            tag = tag.strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and as_utc(self.expires_at) <= utcnow()

    def add_feedback(
        self,
        rating: Optional[int],
        liked: Optional[bool],
        used: Optional[bool],
        comments: Optional[str],
    ) -> None:
        """Replace the whole feedback block; the previous one is discarded."""
        self.feedback_rating = rating
        self.feedback_liked = liked
        self.feedback_used = used
        self.feedback_comments = comments
        self.feedback_date = utcnow()

    def update_confidence(self, confidence: float) -> None:
        self.confidence = confidence

    def add_style_tag(self, tag: str) -> None:
        # reassign so the JSON column registers the change
        self.style_tags = [*(self.style_tags or []), tag]


def _sync_data_points(target: Recommendation) -> None:
    if 'items' not in inspect(target).unloaded:
        target.data_points = len(target.items)
    elif target.data_points is None:
        target.data_points = 0


@event.listens_for(Recommendation, 'before_insert')
def _before_insert(mapper, connection, target: Recommendation) -> None:
    if target.created_at is None:
        target.created_at = utcnow()
    if target.expires_at is None:
        target.expires_at = as_utc(target.created_at) + RECOMMENDATION_TTL
    if target.confidence is None:
        raise ValidationError("Confidence score is required", field="confidence")
    _sync_data_points(target)


@event.listens_for(Recommendation, 'before_update')
def _before_update(mapper, connection, target: Recommendation) -> None:
    _sync_data_points(target)
