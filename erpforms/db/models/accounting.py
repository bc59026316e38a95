"""Chart of accounts, journal settings and journal entries."""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, Numeric, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base


class ChartOfAccountType(Base):
    __tablename__ = "chart_of_account_types"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    alias = Column(String(255), nullable=False)
    is_debit = Column(Boolean, nullable=False, default=True)


class ChartOfAccount(Base):
    __tablename__ = "chart_of_accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type_id = Column(Uuid(as_uuid=True), ForeignKey("chart_of_account_types.id"), nullable=False)
    position = Column(String(10), nullable=False)  # DEBIT / CREDIT
    number = Column(String(50), nullable=True)
    name = Column(String(255), nullable=False)
    alias = Column(String(255), nullable=False)

    type = relationship("ChartOfAccountType")

    def __repr__(self) -> str:
        return f"<ChartOfAccount {self.name}>"


class SettingJournal(Base):
    """
    Maps a (feature, journal line name) pair to a chart of account.

    e.g. ``("stock correction", "difference stock expenses")``.
    """
    __tablename__ = "setting_journals"
    __table_args__ = (UniqueConstraint("feature", "name"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    feature = Column(String(100), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    chart_of_account_id = Column(Uuid(as_uuid=True), ForeignKey("chart_of_accounts.id"), nullable=False)

    chart_of_account = relationship("ChartOfAccount")


class Journal(Base):
    """A single debit or credit line posted for a form."""
    __tablename__ = "journals"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id = Column(Uuid(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    journalable_type = Column(String(100), nullable=True)
    journalable_id = Column(Uuid(as_uuid=True), nullable=True)
    chart_of_account_id = Column(Uuid(as_uuid=True), ForeignKey("chart_of_accounts.id"), nullable=False, index=True)
    debit = Column(Numeric(20, 4), nullable=False, default=0)
    credit = Column(Numeric(20, 4), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    form = relationship("Form")
    chart_of_account = relationship("ChartOfAccount")

    def __repr__(self) -> str:
        return f"<Journal {self.chart_of_account_id} D{self.debit} C{self.credit}>"
