"""Resolution of the form to aggregate link.

``Form.formable_type`` is resolved once, at load time, into a
``FormableKind`` and the aggregate model registered for it.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Type
from uuid import UUID

from sqlalchemy.orm import Session

from erpforms.db.models import DeliveryNote, Form, SalesInvoice, StockCorrection


class FormableKind(str, Enum):
    """Known transaction aggregate kinds."""

    STOCK_CORRECTION = "StockCorrection"
    SALES_INVOICE = "SalesInvoice"
    DELIVERY_NOTE = "DeliveryNote"


FORMABLE_MODELS: Dict[FormableKind, Type] = {
    FormableKind.STOCK_CORRECTION: StockCorrection,
    FormableKind.SALES_INVOICE: SalesInvoice,
    FormableKind.DELIVERY_NOTE: DeliveryNote,
}


class Formable(NamedTuple):
    """A loaded aggregate tagged with its kind, together with its form."""
    kind: FormableKind
    aggregate: object
    form: Form


def model_for(kind) -> Type:
    """Get the aggregate model registered for a kind."""
    return FORMABLE_MODELS[FormableKind(kind)]


def load_formable(db: Session, kind, aggregate_id: Optional[UUID]) -> Optional[Formable]:
    """
    Load an aggregate and its form by kind and id.

    Returns:
        The tagged aggregate, or None when either side is missing
    """
    if aggregate_id is None:
        return None
    kind = FormableKind(kind)
    aggregate = db.get(model_for(kind), aggregate_id)
    if aggregate is None or aggregate.form is None:
        return None
    return Formable(kind=kind, aggregate=aggregate, form=aggregate.form)


def load_form_for_update(db: Session, kind, aggregate_id: UUID) -> Optional[Form]:
    """Load the form of an aggregate holding a row lock for the transition."""
    return db.query(Form).filter(
        Form.formable_type == FormableKind(kind).value,
        Form.formable_id == aggregate_id,
    ).with_for_update().first()
