"""
Ad Spend Service - Amortize daily ad spend over the orders of that day
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from profitlens.core.money import ZERO, quantize
from profitlens.schemas.ad_spend import AdSpendEntry

logger = logging.getLogger(__name__)


@dataclass
class AdSpendAllocation:
    spend_by_date: Dict[date, Decimal] = field(default_factory=dict)
    orders_by_date: Dict[date, int] = field(default_factory=dict)
    cost_per_order: Dict[date, Decimal] = field(default_factory=dict)
    # Dates with spend but no orders: pure loss, not attached to any order
    unallocated_dates: List[date] = field(default_factory=list)

    def cost_for(self, day: date) -> Decimal:
        return self.cost_per_order.get(day, ZERO)

    @property
    def total_spend(self) -> Decimal:
        return sum(self.spend_by_date.values(), ZERO)


class AdSpendService:

    @staticmethod
    def spend_by_date(entries: Iterable[AdSpendEntry], tz_name: Optional[str] = None) -> Dict[date, Decimal]:
        buckets: Dict[date, Decimal] = defaultdict(lambda: ZERO)
        for entry in entries:
            buckets[entry.store_day(tz_name)] += entry.amount
        return dict(sorted(buckets.items()))

    @staticmethod
    def amortize(
        entries: Iterable[AdSpendEntry],
        order_dates: Iterable[date],
        tz_name: Optional[str] = None,
    ) -> AdSpendAllocation:
        """
        Args:
            entries: ad spend records, dated or timestamped
            order_dates: store-local creation date of every order that shares the spend
            tz_name: store zone used for the order dates, applied to timestamped spend too
        """
        spend = AdSpendService.spend_by_date(entries, tz_name)

        counts: Dict[date, int] = defaultdict(int)
        for day in order_dates:
            counts[day] += 1

        allocation = AdSpendAllocation(spend_by_date=spend, orders_by_date=dict(sorted(counts.items())))
        for day, amount in spend.items():
            if amount == 0:
                continue
            n = counts.get(day, 0)
            if n == 0:
                allocation.unallocated_dates.append(day)
                continue
            allocation.cost_per_order[day] = quantize(amount / n)

        if allocation.unallocated_dates:
            logger.warning(
                f"Ad spend on {len(allocation.unallocated_dates)} day(s) without orders: "
                f"{', '.join(d.isoformat() for d in allocation.unallocated_dates)}"
            )
        return allocation
