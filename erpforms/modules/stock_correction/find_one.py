from sqlalchemy.orm import Session, joinedload, selectinload

from erpforms.core.errors import NotFoundError
from erpforms.db.models import Form, StockCorrection, StockCorrectionItem
from erpforms.services.handler import coerce_id

from .base import LABEL


class FindOne:
    """Load a stock correction with its lines, warehouse and form."""

    def __init__(self, db: Session, stock_correction_id):
        self.db = db
        self.stock_correction_id = stock_correction_id

    def call(self) -> StockCorrection:
        stock_correction_id = coerce_id(self.stock_correction_id)
        stock_correction = None
        if stock_correction_id is not None:
            stock_correction = self.db.query(StockCorrection).options(
                selectinload(StockCorrection.items).joinedload(StockCorrectionItem.item),
                selectinload(StockCorrection.items).joinedload(StockCorrectionItem.allocation),
                joinedload(StockCorrection.warehouse),
                joinedload(StockCorrection.form).joinedload(Form.request_approval_to_user),
                joinedload(StockCorrection.form).joinedload(Form.created_by_user),
            ).filter(StockCorrection.id == stock_correction_id).first()
        if stock_correction is None:
            raise NotFoundError(f"{LABEL} is not exist")
        return stock_correction
