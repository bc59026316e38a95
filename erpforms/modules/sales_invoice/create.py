"""Create a sales invoice together with its form."""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from erpforms.core.approval import Actor, ApprovalStatus, FormTransition
from erpforms.core.config import get_settings
from erpforms.core.errors import InvalidStateError, NotFoundError
from erpforms.db.models import (
    Customer,
    Form,
    FormHistory,
    Item,
    SalesInvoice,
    SalesInvoiceItem,
    User,
    Warehouse,
)
from erpforms.db.session import unit_of_work
from erpforms.services.formable import FormableKind, load_formable
from erpforms.services.handler import coerce_id
from erpforms.services.numbering import next_form_number

from .base import LABEL, NUMBER_PREFIX

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
TAX_TYPES = ("include", "exclude", "non")


def percent_discount(value, percent) -> Decimal:
    """Discount worth ``percent`` of ``value``, rounded to cents."""
    return (Decimal(value) * Decimal(str(percent)) / 100).quantize(CENT, ROUND_HALF_UP)


def calculate_totals(lines: List[SalesInvoiceItem], discount_value, type_of_tax: str, tax_rate) -> Tuple[Decimal, Decimal, Decimal]:
    """
    Compute (tax_base, tax, amount) of an invoice.

    ``include`` prices already contain tax, ``exclude`` adds it on top and
    ``non`` is untaxed. Only taxable lines contribute to the tax.
    """
    if type_of_tax not in TAX_TYPES:
        raise InvalidStateError(f"Type of tax must be one of {', '.join(TAX_TYPES)}")
    rate = Decimal(str(tax_rate))
    subtotal = sum((line.total for line in lines), Decimal(0))
    taxable = sum((line.total for line in lines if line.taxable), Decimal(0))
    discount = Decimal(str(discount_value or 0))
    tax_base = subtotal - discount
    taxable_base = taxable - (discount * taxable / subtotal if subtotal else Decimal(0))

    if type_of_tax == "exclude":
        tax = taxable_base * rate
        amount = tax_base + tax
    elif type_of_tax == "include":
        tax = taxable_base * rate / (1 + rate)
        amount = tax_base
    else:
        tax = Decimal(0)
        amount = tax_base
    return (
        tax_base.quantize(CENT, ROUND_HALF_UP),
        tax.quantize(CENT, ROUND_HALF_UP),
        amount.quantize(CENT, ROUND_HALF_UP),
    )


class CreateFormRequest:
    """
    Create a sales invoice and request its approval.

    Payload:
        maker: creating user
        customer_id, request_approval_to: required references
        warehouse_id: warehouse the goods leave from (optional)
        delivery_note_id: approved delivery note the invoice bills (optional)
        items: list of ``{"item_id", "quantity", "price", "discount_percent", "discount_value", "unit",
            "converter", "taxable", "allocation_id", "notes"}``
        discount_percent, discount_value, type_of_tax, due_date, date, notes: optional

    A non-zero ``discount_percent`` (invoice or line) takes precedence over the
    matching ``discount_value``.
    """

    def __init__(self, db: Session, **payload: Any):
        self.db = db
        self.actor = Actor.from_user(payload.pop("maker"))
        self.payload = payload

    def call(self) -> SalesInvoice:
        with unit_of_work(self.db):
            customer = self._get(Customer, self.payload.get("customer_id"), "Customer is not exist")
            approver = self._get(User, self.payload.get("request_approval_to"), "Approver is not exist")
            warehouse = None
            if self.payload.get("warehouse_id"):
                warehouse = self._get(Warehouse, self.payload["warehouse_id"], "Warehouse is not exist")
            reference = self._load_delivery_note()

            lines = self._build_lines(self.payload.get("items") or [])
            type_of_tax = self.payload.get("type_of_tax") or "exclude"
            discount_percent = Decimal(str(self.payload.get("discount_percent") or 0))
            discount_value = Decimal(str(self.payload.get("discount_value") or 0))
            if discount_percent:
                discount_value = percent_discount(sum((line.total for line in lines), Decimal(0)), discount_percent)
            tax_base, tax, amount = calculate_totals(
                lines, discount_value, type_of_tax, get_settings().tax_rate
            )

            sales_invoice = SalesInvoice(
                customer_id=customer.id,
                customer_name=customer.name,
                warehouse_id=warehouse.id if warehouse else None,
                referenceable_type=reference.kind.value if reference else None,
                referenceable_id=reference.aggregate.id if reference else None,
                due_date=self.payload.get("due_date"),
                discount_percent=discount_percent,
                discount_value=discount_value,
                type_of_tax=type_of_tax,
                tax_base=tax_base,
                tax=tax,
                amount=amount,
                items=lines,
            )
            self.db.add(sales_invoice)
            self.db.flush()

            date = self.payload.get("date") or datetime.utcnow()
            form = Form(
                branch_id=warehouse.branch_id if warehouse else None,
                date=date,
                number=next_form_number(self.db, NUMBER_PREFIX, date),
                notes=self.payload.get("notes"),
                formable_type=FormableKind.SALES_INVOICE.value,
                formable_id=sales_invoice.id,
                created_by=self.actor.id,
                updated_by=self.actor.id,
                request_approval_to=approver.id,
                approval_status=ApprovalStatus.PENDING,
            )
            self.db.add(form)
            self.db.flush()
            self.db.add(FormHistory(
                form_id=form.id,
                transition=FormTransition.REQUEST_APPROVAL.value,
                from_status=None,
                to_status=int(ApprovalStatus.PENDING),
                user_id=self.actor.id,
                extra_data={"formable_type": FormableKind.SALES_INVOICE.value},
            ))
            self.db.flush()

        logger.info(f"Created {form.number} amount {amount} requesting approval to {approver.id}")
        return sales_invoice

    def _get(self, model, raw_id, message: str):
        record_id = coerce_id(raw_id)
        record = self.db.get(model, record_id) if record_id else None
        if record is None:
            raise NotFoundError(message)
        return record

    def _load_delivery_note(self):
        raw_id = self.payload.get("delivery_note_id")
        if not raw_id:
            return None
        reference = load_formable(self.db, FormableKind.DELIVERY_NOTE, coerce_id(raw_id))
        if reference is None:
            raise NotFoundError("Delivery note is not exist")
        if reference.form.approval_status != ApprovalStatus.APPROVED:
            raise InvalidStateError("Delivery note is not approved")
        if reference.form.done:
            raise InvalidStateError("Delivery note is already referenced")
        return reference

    def _build_lines(self, items: List[Dict[str, Any]]) -> List[SalesInvoiceItem]:
        if not items:
            raise InvalidStateError(f"{LABEL} items can not be empty")

        lines = []
        for data in items:
            item = self._get(Item, data.get("item_id"), "Item is not exist")
            quantity = Decimal(str(data.get("quantity", 0)))
            price = Decimal(str(data.get("price", 0)))
            discount_percent = Decimal(str(data.get("discount_percent") or 0))
            discount_value = Decimal(str(data.get("discount_value") or 0))
            if discount_percent:
                discount_value = percent_discount(price, discount_percent)
            if quantity <= 0:
                raise InvalidStateError(f"{LABEL} quantity of {item.name} must be greater than zero")
            lines.append(SalesInvoiceItem(
                item_id=item.id,
                item_name=item.name,
                allocation_id=coerce_id(data["allocation_id"]) if data.get("allocation_id") else None,
                quantity=quantity,
                unit=data.get("unit") or item.unit,
                converter=Decimal(str(data.get("converter", 1))),
                price=price,
                discount_percent=discount_percent,
                discount_value=discount_value,
                taxable=data.get("taxable", True),
                notes=data.get("notes"),
            ))
        return lines
