from sqlalchemy import Column, String, Boolean, Date, DateTime, Index, text
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel, SoftDeleteMixin


class User(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "users"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    # stored trimmed + lowercased; uniqueness only among non-deleted users
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(10), nullable=False)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    is_phone_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime, nullable=True)

    dumpsters = relationship("Dumpster", back_populates="owner", passive_deletes=True)

    __table_args__ = (
        Index(
            "ix_users_email_active",
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")
