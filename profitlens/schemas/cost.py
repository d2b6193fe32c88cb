"""
Cost Model Schemas

A cost field carries one value per (variant, payment method) pair. Older
configurations stored either four flat keys (smallPrepaidValue, ...) or just
smallValue/largeValue; both shapes are migrated into CostValues on input.
"""
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from typing import List
from decimal import Decimal
from enum import Enum

from profitlens.core.money import coerce_amount
from .order import PaymentMethod, Variant


class CostFieldType(str, Enum):
    COGS = "cogs"   # delivered / pending orders
    NDR = "ndr"     # failed orders
    BOTH = "both"


class CalculationType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class PercentageType(str, Enum):
    INCLUDED = "included"   # tax already inside the sale price
    EXCLUDED = "excluded"   # charged on top of the sale price


# Flat storage keys -> CostValues attribute
FLAT_VALUE_KEYS = {
    "smallPrepaidValue": "small_prepaid",
    "smallCODValue": "small_cod",
    "largePrepaidValue": "large_prepaid",
    "largeCODValue": "large_cod",
    "small_prepaid_value": "small_prepaid",
    "small_cod_value": "small_cod",
    "large_prepaid_value": "large_prepaid",
    "large_cod_value": "large_cod",
}

# Keys accepted inside a "values" object -> CostValues attribute
NESTED_VALUE_KEYS = {
    **{attr: attr for attr in FLAT_VALUE_KEYS.values()},
    **{to_camel(attr): attr for attr in FLAT_VALUE_KEYS.values()},
    "smallCOD": "small_cod",
    "largeCOD": "large_cod",
    **FLAT_VALUE_KEYS,
}

LEGACY_VALUE_KEYS = {
    "smallValue": ("small_prepaid", "small_cod"),
    "largeValue": ("large_prepaid", "large_cod"),
    "small_value": ("small_prepaid", "small_cod"),
    "large_value": ("large_prepaid", "large_cod"),
}


class CostValues(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    small_prepaid: Decimal = Decimal("0")
    small_cod: Decimal = Decimal("0")
    large_prepaid: Decimal = Decimal("0")
    large_cod: Decimal = Decimal("0")

    def value_for(self, variant: Variant, payment_method: PaymentMethod) -> Decimal:
        lookup = {
            (Variant.SMALL, PaymentMethod.PREPAID): self.small_prepaid,
            (Variant.SMALL, PaymentMethod.COD): self.small_cod,
            (Variant.LARGE, PaymentMethod.PREPAID): self.large_prepaid,
            (Variant.LARGE, PaymentMethod.COD): self.large_cod,
        }
        return lookup[(variant, payment_method)]


class CostField(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    values: CostValues = CostValues()
    type: CostFieldType = CostFieldType.COGS
    calculation_type: CalculationType = CalculationType.FIXED
    percentage_type: PercentageType = PercentageType.EXCLUDED
    clamped_fields: List[str] = []

    @model_validator(mode="before")
    @classmethod
    def _migrate_values(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        clamped = list(data.get("clamped_fields") or [])

        for key in ("percentage_type", "percentageType", "calculation_type", "calculationType", "type"):
            if key in data and data[key] is None:
                data.pop(key)

        raw = data.get("values")
        if isinstance(raw, CostValues):
            raw = raw.model_dump()
        if raw is None:
            raw = {}
            for key, attr in FLAT_VALUE_KEYS.items():
                if key in data:
                    raw[attr] = data.pop(key)
            if not raw:
                for key, attrs in LEGACY_VALUE_KEYS.items():
                    if key in data:
                        for attr in attrs:
                            raw[attr] = data[key]
                        data.pop(key)
        else:
            nested = {}
            for key, value in dict(raw).items():
                attr = NESTED_VALUE_KEYS.get(key)
                if attr is None:
                    clamped.append(f"values.{key}")
                    continue
                nested[attr] = value
            raw = nested

        values = {}
        for attr in ("small_prepaid", "small_cod", "large_prepaid", "large_cod"):
            amount, bad = coerce_amount(raw.get(attr))
            values[attr] = amount
            if bad:
                clamped.append(f"values.{attr}")

        data["values"] = values
        data["clamped_fields"] = clamped
        return data
