"""Request and response schemas of the form workflow API."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransitionAction(BaseModel):
    reason: Optional[str] = None


class DeleteRequestAction(BaseModel):
    reason: str = Field(..., min_length=1)
    request_cancellation_to: Optional[UUID] = None


class FormResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    number: Optional[str]
    date: datetime
    notes: Optional[str]
    created_by: Optional[UUID]
    request_approval_to: Optional[UUID]
    approval_status: str
    approval_reason: Optional[str]
    request_cancellation_to: Optional[UUID]
    request_cancellation_reason: Optional[str]
    cancellation_status: str
    done: bool

    @field_validator("approval_status", "cancellation_status", mode="before")
    @classmethod
    def _status_name(cls, value):
        return value.name.lower() if hasattr(value, "name") else value


class StockCorrectionItemPayload(BaseModel):
    item_id: UUID
    quantity: Decimal
    unit: Optional[str] = None
    converter: Decimal = Decimal(1)
    allocation_id: Optional[UUID] = None
    notes: Optional[str] = None


class StockCorrectionCreate(BaseModel):
    warehouse_id: UUID
    request_approval_to: UUID
    date: Optional[datetime] = None
    notes: Optional[str] = None
    items: List[StockCorrectionItemPayload] = Field(..., min_length=1)


class StockCorrectionItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    item_id: UUID
    quantity: Decimal
    unit: Optional[str]
    converter: Decimal
    notes: Optional[str]


class StockCorrectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    warehouse_id: UUID
    items: List[StockCorrectionItemResponse]
    form: Optional[FormResponse]


class SalesInvoiceItemPayload(BaseModel):
    item_id: UUID
    quantity: Decimal = Field(..., gt=0)
    price: Decimal
    discount_percent: Decimal = Field(Decimal(0), ge=0, le=100)
    discount_value: Decimal = Decimal(0)
    unit: Optional[str] = None
    converter: Decimal = Decimal(1)
    taxable: bool = True
    allocation_id: Optional[UUID] = None
    notes: Optional[str] = None


class SalesInvoiceCreate(BaseModel):
    customer_id: UUID
    request_approval_to: UUID
    warehouse_id: Optional[UUID] = None
    delivery_note_id: Optional[UUID] = None
    discount_percent: Decimal = Field(Decimal(0), ge=0, le=100)
    discount_value: Decimal = Decimal(0)
    type_of_tax: str = "exclude"
    due_date: Optional[datetime] = None
    date: Optional[datetime] = None
    notes: Optional[str] = None
    items: List[SalesInvoiceItemPayload] = Field(..., min_length=1)


class SalesInvoiceItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    item_id: UUID
    item_name: Optional[str]
    quantity: Decimal
    price: Decimal
    discount_percent: Decimal
    discount_value: Decimal
    allocation_id: Optional[UUID]


class ReferenceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    form: Optional[FormResponse]


class SalesInvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    customer_name: Optional[str]
    discount_percent: Decimal
    discount_value: Decimal
    type_of_tax: str
    tax_base: Decimal
    tax: Decimal
    amount: Decimal
    items: List[SalesInvoiceItemResponse]
    form: Optional[FormResponse]
    referenceable: Optional[ReferenceResponse] = None


class DeletedResponse(BaseModel):
    id: UUID
    number: Optional[str]
    cancellation_status: str
    deleted: bool = True


class FormHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    transition: str
    from_status: Optional[int]
    to_status: int
    user_id: Optional[UUID]
    reason: Optional[str]
    created_at: datetime
