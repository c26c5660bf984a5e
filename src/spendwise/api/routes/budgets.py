from fastapi import APIRouter

from spendwise.api.schemas import BudgetOverviewRequest
from spendwise.domain.periods import Period, resolve_now
from spendwise.services.budgets import budget_overview

router = APIRouter(prefix="/api/budgets")


@router.post("/overview")
async def get_budget_overview(req: BudgetOverviewRequest) -> dict[str, object]:
    period = Period.for_key(req.month) if req.month else Period.month_of(resolve_now(req.now))
    return budget_overview(req.categories, req.transactions, period).to_dict()
