from fastapi import APIRouter, HTTPException

from profitlens.core import ProfitLensError
from profitlens.schemas.report import ReportRequest, PnLReport
from profitlens.schemas.projection import (
    ProjectionRequest, ProjectionResult, HistoricalProjectionRequest, HistoricalProjection,
)
from profitlens.services import PnLService, ProjectionService

router = APIRouter(prefix="/reports", tags=["Reporting"])


@router.post("/pnl", response_model=PnLReport)
def build_pnl_report(request: ReportRequest):
    """
    Per-order P&L with daily and monthly aggregates

    Degraded computations (no cost model, ad spend on days without orders,
    undefined ratios) are listed in `notices`.
    """
    try:
        return PnLService.build_report(request)
    except ProfitLensError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/projection", response_model=ProjectionResult)
def project_profit(request: ProjectionRequest):
    return ProjectionService.project(request)


@router.post("/projection/from-history", response_model=HistoricalProjection)
def project_profit_from_history(request: HistoricalProjectionRequest):
    """Averages over the trailing window (or the given one), then the projection"""
    try:
        return ProjectionService.from_history(request)
    except ProfitLensError as e:
        raise HTTPException(status_code=500, detail=str(e))
