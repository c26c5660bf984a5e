from typing import Annotated

from fastapi import APIRouter, Depends

from spendwise.api.dependencies import get_alert_service
from spendwise.api.schemas import SnapshotRequest
from spendwise.logger import get_logger
from spendwise.manager import BudgetAlertService
from spendwise.models import AlertRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/alerts")


@router.post("/evaluate", response_model=list[AlertRequest])
async def evaluate_alerts(
    req: SnapshotRequest,
    service: Annotated[BudgetAlertService, Depends(get_alert_service)],
) -> list[AlertRequest]:
    return service.check_budgets(req.categories, req.transactions, now=req.now)


@router.post("/reset")
async def reset_alerts(
    service: Annotated[BudgetAlertService, Depends(get_alert_service)],
) -> dict[str, str]:
    logger.info("[ALERTS] Reset requested.")
    service.reset_monthly_alerts()
    return {"status": "cleared"}


@router.get("/state")
async def get_alert_state(
    service: Annotated[BudgetAlertService, Depends(get_alert_service)],
) -> dict[str, dict[str, list[int]]]:
    return service.tracker.snapshot()
