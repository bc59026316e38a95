"""Stock correction API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from erpforms.api.deps import get_db, get_current_user
from erpforms.api.schemas import (
    DeletedResponse,
    DeleteRequestAction,
    FormHistoryResponse,
    StockCorrectionCreate,
    StockCorrectionResponse,
    TransitionAction,
)
from erpforms.db.models import User
from erpforms.modules import stock_correction

router = APIRouter(prefix="/inventory/corrections", tags=["stock corrections"])


@router.post("", response_model=StockCorrectionResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_correction(
    payload: StockCorrectionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a stock correction and request its approval."""
    created = stock_correction.CreateFormRequest(
        db,
        maker=current_user,
        warehouse_id=payload.warehouse_id,
        request_approval_to=payload.request_approval_to,
        date=payload.date,
        notes=payload.notes,
        items=[item.model_dump() for item in payload.items],
    ).call()
    db.commit()
    return stock_correction.FindOne(db, created.id).call()


@router.get("/{stock_correction_id}", response_model=StockCorrectionResponse)
async def get_stock_correction(
    stock_correction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return stock_correction.FindOne(db, stock_correction_id).call()


@router.get("/{stock_correction_id}/history", response_model=List[FormHistoryResponse])
async def get_stock_correction_history(
    stock_correction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get the status transition history of a stock correction's form."""
    found = stock_correction.FindOne(db, stock_correction_id).call()
    return found.form.history


@router.post("/{stock_correction_id}/approve", response_model=StockCorrectionResponse)
async def approve_stock_correction(
    stock_correction_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stock_correction.FormApprove(
        db, approver=current_user, stock_correction_id=stock_correction_id, reason=action.reason
    ).call()
    db.commit()
    return stock_correction.FindOne(db, stock_correction_id).call()


@router.post("/{stock_correction_id}/reject", response_model=StockCorrectionResponse)
async def reject_stock_correction(
    stock_correction_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stock_correction.FormReject(
        db, approver=current_user, stock_correction_id=stock_correction_id, reason=action.reason
    ).call()
    db.commit()
    return stock_correction.FindOne(db, stock_correction_id).call()


@router.post("/{stock_correction_id}/delete-request", response_model=StockCorrectionResponse)
async def request_stock_correction_delete(
    stock_correction_id: str,
    action: DeleteRequestAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Ask the approver to delete a stock correction."""
    stock_correction.DeleteFormRequest(
        db,
        maker=current_user,
        stock_correction_id=stock_correction_id,
        reason=action.reason,
        request_cancellation_to=action.request_cancellation_to,
    ).call()
    db.commit()
    return stock_correction.FindOne(db, stock_correction_id).call()


@router.post("/{stock_correction_id}/delete-approve", response_model=DeletedResponse)
async def approve_stock_correction_delete(
    stock_correction_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approve a pending delete request; the stock correction is removed."""
    handler = stock_correction.DeleteFormApprove(
        db, approver=current_user, stock_correction_id=stock_correction_id, reason=action.reason
    )
    deleted = handler.call()
    db.commit()
    return DeletedResponse(
        id=deleted.id,
        number=handler.form.number,
        cancellation_status=handler.form.cancellation_status.name.lower(),
    )


@router.post("/{stock_correction_id}/delete-reject", response_model=StockCorrectionResponse)
async def reject_stock_correction_delete(
    stock_correction_id: str,
    action: TransitionAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stock_correction.DeleteFormReject(
        db, approver=current_user, stock_correction_id=stock_correction_id, reason=action.reason
    ).call()
    db.commit()
    return stock_correction.FindOne(db, stock_correction_id).call()
