from enum import Enum

from sqlalchemy import Column, String, Integer, Float, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base, SoftDeleteMixin


class UsageStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    # Accepted by the store and filters; no operation produces it yet
    CANCELLED = "cancelled"


class DumpsterUsage(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "dumpster_usages"

    dumpster_id = Column(String(36), ForeignKey("dumpsters.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    total_cost = Column(Float, nullable=True)
    status = Column(
        SAEnum(UsageStatus, name="usage_status", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UsageStatus.ACTIVE,
        index=True,
    )
    notes = Column(Text, nullable=True)

    dumpster = relationship("Dumpster")
    user = relationship("User")

    # No uniqueness on (user_id, dumpster_id, status='active'): exclusivity is a
    # pre-check in UsageService.start_usage only.
    __table_args__ = (
        CheckConstraint("end_time IS NULL OR end_time > start_time", name="ck_dumpster_usages_time"),
    )
