"""
Ad Spend Schemas
"""
from pydantic import BaseModel, Field, AliasChoices, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from dateutil.parser import isoparse

from profitlens.core.dates import store_date
from profitlens.core.money import coerce_amount

DATE_KEYS = ("spend_date", "date", "spendDate")


class AdSpendEntry(BaseModel):
    """One day's ad spend. Several entries on the same date are summed."""
    spend_date: date = Field(validation_alias=AliasChoices(*DATE_KEYS))
    # Original instant when the record carried a timestamp instead of a date
    spend_at: Optional[datetime] = None
    amount: Decimal = Decimal("0")
    notes: Optional[str] = ""
    clamped_fields: List[str] = []

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)

        for key in DATE_KEYS:
            if key not in data:
                continue
            value = data[key]
            if isinstance(value, str) and ("T" in value or " " in value.strip()):
                value = isoparse(value.strip())
            if isinstance(value, datetime):
                data["spend_at"] = value
                value = store_date(value)
            data[key] = value
            break

        clamped = list(data.get("clamped_fields") or [])
        amount, bad = coerce_amount(data.get("amount"))
        data["amount"] = amount
        if bad:
            clamped.append("amount")
        data["clamped_fields"] = clamped
        return data

    def store_day(self, tz_name: Optional[str] = None) -> date:
        """Calendar date in the given store zone. Plain dates are taken as already local."""
        if self.spend_at is not None:
            return store_date(self.spend_at, tz_name)
        return self.spend_date
