from erpforms.core.approval import FormTransition

from .base import StockCorrectionHandler


class FormReject(StockCorrectionHandler):
    """Reject a stock correction. Expects ``reason`` in the payload."""

    transition = FormTransition.REJECT
