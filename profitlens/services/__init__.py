# Services Package
from .variant_service import VariantService
from .status_service import StatusService, Classification
from .cost_service import CostService, Allocation
from .ad_spend_service import AdSpendService, AdSpendAllocation
from .pnl_service import PnLService
from .projection_service import ProjectionService

__all__ = [
    "VariantService",
    "StatusService", "Classification",
    "CostService", "Allocation",
    "AdSpendService", "AdSpendAllocation",
    "PnLService",
    "ProjectionService",
]
