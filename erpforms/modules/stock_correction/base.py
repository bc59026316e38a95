from erpforms.services.formable import FormableKind
from erpforms.services.handler import FormTransitionHandler

LABEL = "Stock correction"
FEATURE = "stock correction"
NUMBER_PREFIX = "SC"


class StockCorrectionHandler(FormTransitionHandler):
    kind = FormableKind.STOCK_CORRECTION
    label = LABEL
    id_field = "stock_correction_id"
