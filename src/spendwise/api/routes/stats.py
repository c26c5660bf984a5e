from fastapi import APIRouter

from spendwise.api.schemas import StatsRequest
from spendwise.models import CategorySpend, SpendBucket
from spendwise.services.aggregation import category_totals, month_overview, period_summary, spending_series

router = APIRouter(prefix="/api/stats")


@router.post("/spending", response_model=list[SpendBucket])
async def get_spending_series(req: StatsRequest) -> list[SpendBucket]:
    return spending_series(req.transactions, req.period, now=req.now)


@router.post("/categories", response_model=list[CategorySpend])
async def get_category_totals(req: StatsRequest) -> list[CategorySpend]:
    return category_totals(req.transactions, req.period, req.categories, now=req.now)


@router.post("/summary")
async def get_period_summary(req: StatsRequest) -> dict[str, object]:
    summary = period_summary(req.transactions, req.period, req.categories, now=req.now)
    return {
        **summary.to_dict(),
        "month": month_overview(req.transactions, now=req.now).to_dict(),
    }
