"""Sales invoice API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from erpforms.api.deps import get_db, get_current_user
from erpforms.api.schemas import (
    DeletedResponse,
    DeleteRequestAction,
    FormHistoryResponse,
    SalesInvoiceCreate,
    SalesInvoiceResponse,
    TransitionAction,
)
from erpforms.db.models import User
from erpforms.modules import sales_invoice

router = APIRouter(prefix="/sales/invoices", tags=["sales invoices"])


@router.post("", response_model=SalesInvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_sales_invoice(
    payload: SalesInvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a sales invoice and request its approval."""
    data = payload.model_dump(exclude={"items"})
    created = sales_invoice.CreateFormRequest(
        db,
        maker=current_user,
        items=[item.model_dump() for item in payload.items],
        **data,
    ).call()
    db.commit()
    return sales_invoice.FindOne(db, created.id).call()


@router.get("/{sales_invoice_id}", response_model=SalesInvoiceResponse)
async def get_sales_invoice(
    sales_invoice_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a sales invoice with its items, form and referenced delivery note."""
    return sales_invoice.FindOne(db, sales_invoice_id).call()


@router.get("/{sales_invoice_id}/history", response_model=List[FormHistoryResponse])
async def get_sales_invoice_history(
    sales_invoice_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    found = sales_invoice.FindOne(db, sales_invoice_id).call()
    return found.form.history


@router.post("/{sales_invoice_id}/approve", response_model=SalesInvoiceResponse)
async def approve_sales_invoice(
    sales_invoice_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approve a sales invoice and post its journal and inventory."""
    sales_invoice.FormApprove(
        db, approver=current_user, sales_invoice_id=sales_invoice_id, reason=action.reason
    ).call()
    db.commit()
    return sales_invoice.FindOne(db, sales_invoice_id).call()


@router.post("/{sales_invoice_id}/reject", response_model=SalesInvoiceResponse)
async def reject_sales_invoice(
    sales_invoice_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sales_invoice.FormReject(
        db, approver=current_user, sales_invoice_id=sales_invoice_id, reason=action.reason
    ).call()
    db.commit()
    return sales_invoice.FindOne(db, sales_invoice_id).call()


@router.post("/{sales_invoice_id}/delete-request", response_model=SalesInvoiceResponse)
async def request_sales_invoice_delete(
    sales_invoice_id: str,
    action: DeleteRequestAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sales_invoice.DeleteFormRequest(
        db,
        maker=current_user,
        sales_invoice_id=sales_invoice_id,
        reason=action.reason,
        request_cancellation_to=action.request_cancellation_to,
    ).call()
    db.commit()
    return sales_invoice.FindOne(db, sales_invoice_id).call()


@router.post("/{sales_invoice_id}/delete-approve", response_model=DeletedResponse)
async def approve_sales_invoice_delete(
    sales_invoice_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approve a pending delete request; postings are reversed and the invoice removed."""
    handler = sales_invoice.DeleteFormApprove(
        db, approver=current_user, sales_invoice_id=sales_invoice_id, reason=action.reason
    )
    deleted = handler.call()
    db.commit()
    return DeletedResponse(
        id=deleted.id,
        number=handler.form.number,
        cancellation_status=handler.form.cancellation_status.name.lower(),
    )


@router.post("/{sales_invoice_id}/delete-reject", response_model=SalesInvoiceResponse)
async def reject_sales_invoice_delete(
    sales_invoice_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sales_invoice.DeleteFormReject(
        db, approver=current_user, sales_invoice_id=sales_invoice_id, reason=action.reason
    ).call()
    db.commit()
    return sales_invoice.FindOne(db, sales_invoice_id).call()
