import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UserRole(enum.Enum):
    USER = "user"
    VERIFIED = "verified"  # ID Verified
    PREMIUM = "premium"
    MODERATOR = "moderator"
    ADMIN = "admin"


class User(Base):
    """Identity record the user directory hands to the session manager"""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"
