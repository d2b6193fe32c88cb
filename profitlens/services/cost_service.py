"""
Cost Service - Per-order cost allocation from the cost model
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from profitlens.core.money import ZERO, HUNDRED, quantize
from profitlens.schemas.order import Order, OrderStatus, Variant
from profitlens.schemas.cost import CostField, CostFieldType, CalculationType, PercentageType
from profitlens.schemas.report import CostLine


@dataclass
class Allocation:
    total: Decimal = ZERO
    revenue: Decimal = ZERO
    lines: List[CostLine] = field(default_factory=list)


class CostService:

    # Which field types apply to each classification
    APPLICABLE_TYPES = {
        OrderStatus.DELIVERED: (CostFieldType.COGS, CostFieldType.BOTH),
        OrderStatus.PENDING: (CostFieldType.COGS, CostFieldType.BOTH),
        OrderStatus.FAILED: (CostFieldType.NDR, CostFieldType.BOTH),
    }

    @staticmethod
    def contribution(cost_field: CostField, value: Decimal, price: Decimal) -> Decimal:
        if cost_field.calculation_type == CalculationType.FIXED:
            return quantize(value)
        if cost_field.percentage_type == PercentageType.INCLUDED:
            # Fee already embedded in the price
            return quantize(price * value / (HUNDRED + value))
        return quantize(price * value / HUNDRED)

    @staticmethod
    def allocate(
        order: Order,
        status: OrderStatus,
        variant: Variant,
        cost_fields: List[CostField],
    ) -> Allocation:
        """
        Itemized cost for one order.

        Revenue is recognized only for delivered orders; pending orders still
        carry their COGS so the estimate reflects what fulfilment will cost.
        """
        price = order.total_price or ZERO
        applicable = CostService.APPLICABLE_TYPES[status]
        allocation = Allocation(revenue=price if status == OrderStatus.DELIVERED else ZERO)

        for cost_field in cost_fields:
            if cost_field.type not in applicable:
                continue
            value = cost_field.values.value_for(variant, order.payment_method)
            amount = CostService.contribution(cost_field, value, price)
            allocation.lines.append(CostLine(
                field_id=cost_field.id,
                name=cost_field.name,
                type=cost_field.type,
                calculation_type=cost_field.calculation_type,
                percentage_type=(
                    cost_field.percentage_type
                    if cost_field.calculation_type == CalculationType.PERCENTAGE else None
                ),
                value=value,
                contribution=amount,
            ))
            allocation.total += amount

        allocation.total = quantize(allocation.total)
        return allocation
