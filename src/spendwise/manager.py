from collections.abc import Sequence
from datetime import datetime

from spendwise.alerts.notifications import (
    LoggingNotificationChannel,
    NotificationChannel,
    build_budget_notification,
)
from spendwise.alerts.state import JsonFileAlertStateStore
from spendwise.alerts.tracker import ThresholdAlertTracker
from spendwise.core import settings
from spendwise.logger import get_logger
from spendwise.models import AlertRequest, Category, Transaction

logger = get_logger(__name__)


class BudgetAlertService:
    def __init__(self,
                 tracker: ThresholdAlertTracker,
                 channel: NotificationChannel,
                 notifications_enabled: bool = True):
        self.tracker = tracker
        self.channel = channel
        self.notifications_enabled = notifications_enabled

    @classmethod
    def from_settings(cls, data_dir: str | None = None) -> "BudgetAlertService":
        store = JsonFileAlertStateStore(data_path=settings.get_alert_state_path(data_dir))
        tracker = ThresholdAlertTracker(
            store=store,
            currency_code=settings.get_currency_code(),
            retention_months=settings.get_alert_retention_months(),
        )
        enabled = settings.notifications_enabled()
        if not enabled:
            logger.warning("NOTIFICATIONS_ENABLED is off. Budget alerts will not be evaluated.")
        logger.info(f"Alert state stored at {store.data_path}")
        return cls(tracker=tracker, channel=LoggingNotificationChannel(), notifications_enabled=enabled)

    def check_budgets(
        self,
        categories: Sequence[Category],
        transactions: Sequence[Transaction],
        now: datetime | None = None,
    ) -> list[AlertRequest]:
        """
        Evaluate budgets after a transaction change and forward new alerts.
        """
        if not self.notifications_enabled:
            logger.debug("Notifications disabled, skipping budget check.")
            return []

        alerts = self.tracker.evaluate(categories, transactions, now=now)
        for alert in alerts:
            notification = build_budget_notification(alert)
            try:
                self.channel.schedule(notification)
            except Exception:
                # The decision stands; delivery is the channel's problem
                logger.exception(f"Failed to schedule notification '{notification.identifier}'")
        return alerts

    def reset_monthly_alerts(self) -> None:
        self.tracker.reset_monthly_alerts()
