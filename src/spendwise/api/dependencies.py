from fastapi import HTTPException, Request

from spendwise.manager import BudgetAlertService


def get_alert_service(request: Request) -> BudgetAlertService:
    service = getattr(request.app.state, "alert_service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service
