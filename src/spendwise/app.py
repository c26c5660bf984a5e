from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from spendwise.api.routes import alerts, budgets, stats
from spendwise.core import settings
from spendwise.logger import get_logger, setup_logging
from spendwise.manager import BudgetAlertService

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        app.state.alert_service = BudgetAlertService.from_settings(data_dir=settings.DATA_DIR)

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="SpendWise Budget Engine", lifespan=lifespan)

    app.include_router(stats.router)
    app.include_router(budgets.router)
    app.include_router(alerts.router)

    return app


app = create_app()
