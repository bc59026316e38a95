import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base


class Role(Base):
    __tablename__ = "roles"
    __table_args__ = (UniqueConstraint("name", "guard_name"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    guard_name = Column(String(50), nullable=False, default="api")
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    assignments = relationship("ModelHasRole", back_populates="role", cascade="all, delete-orphan")


class ModelHasRole(Base):
    """Assigns a role to a user."""
    __tablename__ = "model_has_roles"

    role_id = Column(Uuid(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    model_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    model_type = Column(String(100), nullable=False, default="User")

    # Relationships
    role = relationship("Role", back_populates="assignments")
    user = relationship("User", back_populates="role_assignments")
