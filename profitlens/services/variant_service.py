"""
Variant Service - Small/Large detection from line items
"""
from typing import List

from profitlens.schemas.order import LineItem, Variant


class VariantService:

    @staticmethod
    def detect_variant(line_items: List[LineItem]) -> Variant:
        """
        Keyword heuristic: any line item whose title or variant title mentions
        "large" makes the whole order large. No line items means small.
        """
        for item in line_items or []:
            title = (item.title or "").lower()
            variant_title = (item.variant_title or "").lower()
            if "large" in title or "large" in variant_title:
                return Variant.LARGE
        return Variant.SMALL
