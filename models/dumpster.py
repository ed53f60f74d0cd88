from enum import Enum

from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Boolean,
    Numeric,
    Text,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base, SoftDeleteMixin


class DumpsterSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extraLarge"


class Dumpster(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "dumpsters"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(10), nullable=False)
    price_per_day = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    size = Column(
        SAEnum(DumpsterSize, name="dumpster_size", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    is_available = Column(Boolean, nullable=False, default=True)
    # Denormalized from reviews; only the rating aggregation writes these
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    capacity = Column(String(50), nullable=True)
    weight = Column(String(50), nullable=True)

    owner = relationship("User", back_populates="dumpsters")

    __table_args__ = (
        CheckConstraint("price_per_day > 0", name="ck_dumpsters_price_positive"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_dumpsters_rating_range"),
        CheckConstraint("review_count >= 0", name="ck_dumpsters_review_count_nonnegative"),
        Index("ix_dumpsters_location", "latitude", "longitude"),
        Index("ix_dumpsters_city_state", "city", "state"),
    )
