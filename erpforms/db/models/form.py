"""Form database models.

A form is the envelope every business transaction carries: its document
number, approval and cancellation routing, status flags and audit trail.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Text, Boolean, Integer, Uuid
from sqlalchemy.orm import relationship

from erpforms.core.approval.states import ApprovalStatus, CancellationStatus
from erpforms.db.base import Base
from erpforms.db.session import StatusType


class Form(Base):
    """
    Approval envelope of one transaction aggregate.

    ``formable_type``/``formable_id`` link the form to exactly one aggregate
    (StockCorrection, SalesInvoice, DeliveryNote). ``version`` is checked on
    every UPDATE so concurrent transitions on the same form conflict.
    """
    __tablename__ = "forms"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    branch_id = Column(Uuid(as_uuid=True), ForeignKey("branches.id", ondelete="SET NULL"), nullable=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    number = Column(String(100), unique=True, nullable=True, index=True)
    notes = Column(Text, nullable=True)

    # Polymorphic link to the transaction aggregate
    formable_type = Column(String(100), nullable=False, index=True)
    formable_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    # Audit
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Approval routing
    request_approval_to = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approval_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approval_at = Column(DateTime, nullable=True)
    approval_reason = Column(Text, nullable=True)
    approval_status = Column(StatusType(ApprovalStatus), nullable=True)

    # Cancellation routing
    request_cancellation_to = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    request_cancellation_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    request_cancellation_at = Column(DateTime, nullable=True)
    request_cancellation_reason = Column(Text, nullable=True)
    cancellation_approval_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    cancellation_approval_at = Column(DateTime, nullable=True)
    cancellation_approval_reason = Column(Text, nullable=True)
    cancellation_status = Column(StatusType(CancellationStatus), nullable=True)

    # Referenced by a downstream transaction
    done = Column(Boolean, nullable=False, default=False)

    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    branch = relationship("Branch")
    created_by_user = relationship("User", foreign_keys=[created_by])
    updated_by_user = relationship("User", foreign_keys=[updated_by])
    request_approval_to_user = relationship("User", foreign_keys=[request_approval_to])
    request_cancellation_to_user = relationship("User", foreign_keys=[request_cancellation_to])
    history = relationship(
        "FormHistory",
        back_populates="form",
        order_by="FormHistory.created_at",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    def __init__(self, **kwargs):
        kwargs.setdefault("approval_status", ApprovalStatus.UNSET)
        kwargs.setdefault("cancellation_status", CancellationStatus.UNSET)
        kwargs.setdefault("done", False)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<Form {self.number} {self.formable_type} [{self.approval_status.name}/{self.cancellation_status.name}]>"


class FormHistory(Base):
    """
    Records every status transition of a form.

    Provides the audit trail of the approval and cancellation workflow.
    """
    __tablename__ = "form_histories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id = Column(Uuid(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)

    # Transition details
    transition = Column(String(50), nullable=False)
    from_status = Column(Integer, nullable=True)
    to_status = Column(Integer, nullable=True)

    # Actor
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reason = Column(Text, nullable=True)

    # Additional context
    extra_data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    form = relationship("Form", back_populates="history")
    user = relationship("User")

    def __repr__(self) -> str:
        return f"<FormHistory {self.transition} {self.from_status} -> {self.to_status}>"
