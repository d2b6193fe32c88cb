"""
Order Schemas

Orders come from the storefront feed (Shopify-style camelCase or snake_case
keys). Amounts are clamped to zero at the boundary; the names of clamped
fields are kept on the model so the engine can report them.
"""
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum

from profitlens.core.money import coerce_amount, coerce_signed


class PaymentMethod(str, Enum):
    PREPAID = "prepaid"
    COD = "cod"


class OrderStatus(str, Enum):
    DELIVERED = "Delivered"
    FAILED = "Failed"
    PENDING = "Pending"


class Variant(str, Enum):
    SMALL = "small"
    LARGE = "large"


class FeedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LineItem(FeedModel):
    title: Optional[str] = ""
    quantity: Optional[int] = 1
    variant_title: Optional[str] = None


CHARGE_KEYS = {
    "freight_forward", "freightForward",
    "freight_cod", "freightCOD", "freightCod",
    "freight_rto", "freightRTO", "freightRto",
    "messaging_charges", "messagingCharges", "whatsappCharges",
    "other_charges", "otherCharges",
}


class ShippingBreakdown(FeedModel):
    """Courier charges for one shipment. freight_cod is negative when reversed."""
    freight_forward: Decimal = Decimal("0")
    freight_cod: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("freight_cod", "freightCOD", "freightCod"),
    )
    freight_rto: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("freight_rto", "freightRTO", "freightRto"),
    )
    messaging_charges: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("messaging_charges", "messagingCharges", "whatsappCharges"),
    )
    other_charges: Decimal = Decimal("0")
    clamped_fields: List[str] = []

    @model_validator(mode="before")
    @classmethod
    def _clamp_charges(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        clamped = list(data.get("clamped_fields") or [])
        # Courier metadata (awbCode, courierName, ...) is left to pydantic
        for key in list(data.keys()):
            if key not in CHARGE_KEYS:
                continue
            if key in ("freight_cod", "freightCOD", "freightCod"):
                amount, bad = coerce_signed(data[key])
            else:
                amount, bad = coerce_amount(data[key])
            data[key] = amount
            if bad:
                clamped.append(key)
        data["clamped_fields"] = clamped
        return data

    @property
    def total(self) -> Decimal:
        return (self.freight_forward + self.freight_cod + self.freight_rto
                + self.messaging_charges + self.other_charges)


class Order(FeedModel):
    id: str
    name: Optional[str] = None
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    fulfillment_status: Optional[str] = None
    delivery_status: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.COD
    total_price: Decimal = Decimal("0")
    line_items: List[LineItem] = []
    shipping_breakdown: Optional[ShippingBreakdown] = None
    shipping_charge: Optional[Decimal] = None
    clamped_fields: List[str] = []

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("payment_method", mode="before")
    @classmethod
    def _normalize_payment_method(cls, v):
        # Anything that is not explicitly prepaid is collected on delivery
        if isinstance(v, PaymentMethod):
            return v
        if isinstance(v, str) and v.strip().lower() == "prepaid":
            return PaymentMethod.PREPAID
        return PaymentMethod.COD

    @field_validator("line_items", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return v or []

    @model_validator(mode="before")
    @classmethod
    def _clamp_amounts(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        clamped = list(data.get("clamped_fields") or [])
        for field, alias in (("total_price", "totalPrice"), ("shipping_charge", "shippingCharge")):
            key = field if field in data else alias
            if key not in data:
                continue
            if data[key] is None:
                if field == "total_price":
                    data[key] = Decimal("0")
                continue
            amount, bad = coerce_amount(data[key])
            data[key] = amount
            if bad:
                clamped.append(field)
        data["clamped_fields"] = clamped
        return data

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled_at is not None
