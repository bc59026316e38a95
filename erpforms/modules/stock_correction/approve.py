from erpforms.core.approval import FormTransition

from .base import StockCorrectionHandler


class FormApprove(StockCorrectionHandler):
    """Approve a stock correction, posting its inventory and journal."""

    transition = FormTransition.APPROVE
