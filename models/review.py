from sqlalchemy import Column, String, Integer, Text, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Review(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "reviews"

    dumpster_id = Column(String(36), ForeignKey("dumpsters.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    dumpster = relationship("Dumpster")
    user = relationship("User")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        # Covers soft-deleted rows too; a returning reviewer revives their old row
        UniqueConstraint("user_id", "dumpster_id", name="uq_reviews_user_dumpster"),
    )
