"""Master data referenced by transactions."""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Numeric, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    warehouses = relationship("Warehouse", back_populates="branch")


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    branch_id = Column(Uuid(as_uuid=True), ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    branch = relationship("Branch", back_populates="warehouses")


class Item(Base):
    """
    A stock keeping item.

    ``stock`` is the running quantity maintained by inventory postings and
    ``cogs`` the cost per base unit used to value them.
    """
    __tablename__ = "items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    chart_of_account_id = Column(Uuid(as_uuid=True), ForeignKey("chart_of_accounts.id"), nullable=True)
    code = Column(String(100), nullable=True, unique=True)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=False, default="pcs")
    stock = Column(Numeric(20, 4), nullable=False, default=0)
    cogs = Column(Numeric(20, 4), nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    chart_of_account = relationship("ChartOfAccount")

    def __repr__(self) -> str:
        return f"<Item {self.name} ({self.stock})>"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Allocation(Base):
    """Cost/revenue allocation tag attached to transaction lines."""
    __tablename__ = "allocations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
