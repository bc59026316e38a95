from erpforms.core.approval import FormTransition

from .base import StockCorrectionHandler


class DeleteFormReject(StockCorrectionHandler):
    transition = FormTransition.REJECT_CANCELLATION
