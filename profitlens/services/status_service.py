"""
Status Service - Delivered / Failed / Pending classification
"""
from dataclasses import dataclass
from typing import Optional, Set

from profitlens.schemas.order import Order, OrderStatus, PaymentMethod
from profitlens.schemas.report import ClassificationPolicy, DeliveryStage


@dataclass(frozen=True)
class Classification:
    status: OrderStatus
    is_terminal: bool
    delivery_stage: DeliveryStage


class StatusService:

    DEFAULT_POLICY = ClassificationPolicy()

    @staticmethod
    def normalize(delivery_status: Optional[str]) -> str:
        return (delivery_status or "").strip().lower()

    @staticmethod
    def is_failure_signal(status: str) -> bool:
        return status == "failure" or "failed" in status or "rto" in status

    @staticmethod
    def classify(
        order: Order,
        rto_ids: Optional[Set[str]] = None,
        policy: Optional[ClassificationPolicy] = None,
    ) -> Classification:
        """
        Classify one non-cancelled order.

        Priority:
            1. RTO override set -> Failed
            2. failure / *failed* / *rto* -> Failed
            3. delivered -> Delivered
            4. prepaid -> Delivered (unless the policy excludes the status)
            5. Pending
        """
        policy = policy or StatusService.DEFAULT_POLICY
        status = StatusService.normalize(order.delivery_status)
        failure_signal = StatusService.is_failure_signal(status)
        terminal = failure_signal or status == "delivered"

        if rto_ids and order.id in rto_ids:
            return Classification(OrderStatus.FAILED, True, DeliveryStage.FAILED)
        if failure_signal:
            return Classification(OrderStatus.FAILED, terminal, DeliveryStage.FAILED)
        if status == "delivered":
            return Classification(OrderStatus.DELIVERED, terminal, DeliveryStage.DELIVERED)

        if order.payment_method == PaymentMethod.PREPAID:
            excluded = any(
                token.strip().lower() in status
                for token in policy.prepaid_shortcut_exclusions
                if token and token.strip()
            )
            if not excluded:
                return Classification(OrderStatus.DELIVERED, terminal, DeliveryStage.DELIVERED)

        return Classification(OrderStatus.PENDING, terminal, StatusService.delivery_stage(status))

    @staticmethod
    def delivery_stage(status: str) -> DeliveryStage:
        """Bucket a non-final delivery status for the status breakdown."""
        if "out for delivery" in status or "out_for_delivery" in status:
            return DeliveryStage.OUT_FOR_DELIVERY
        if "attempt" in status:
            return DeliveryStage.ATTEMPTED_DELIVERY
        if "transit" in status or "shipped" in status or "picked" in status:
            return DeliveryStage.IN_TRANSIT
        return DeliveryStage.CONFIRMED
