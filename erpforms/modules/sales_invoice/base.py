from erpforms.services.formable import FormableKind
from erpforms.services.handler import FormTransitionHandler

LABEL = "Sales invoice"
FEATURE = "sales"
NUMBER_PREFIX = "SI"


class SalesInvoiceHandler(FormTransitionHandler):
    kind = FormableKind.SALES_INVOICE
    label = LABEL
    id_field = "sales_invoice_id"
