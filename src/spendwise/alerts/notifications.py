from abc import ABC, abstractmethod

from spendwise.logger import get_logger
from spendwise.models import AlertRequest, BudgetNotification

logger = get_logger(__name__)


def build_budget_notification(alert: AlertRequest) -> BudgetNotification:
    name = alert.category_name
    amounts = f"({alert.amount_spent_formatted} of {alert.budget_amount_formatted})"
    threshold = alert.threshold_percent

    if threshold >= 100:
        body = f"You've exceeded your {name} budget! {amounts}"
        priority = "high"
    elif threshold >= 90:
        body = f"Warning: {threshold}% of your {name} budget spent! {amounts}"
        priority = "high"
    else:
        body = f"You've used {threshold}% of your {name} budget {amounts}"
        priority = "low"

    return BudgetNotification(
        identifier=f"budget-{name.lower()}-{threshold}",
        title=f"Budget Alert: {name}",
        body=body,
        priority=priority,
    )


class NotificationChannel(ABC):
    @abstractmethod
    def schedule(self, notification: BudgetNotification) -> None:
        """Hand a notification to the platform for delivery."""
        pass


class LoggingNotificationChannel(NotificationChannel):
    """Channel for hosts without a platform notifier; keeps what it was given."""

    def __init__(self) -> None:
        self.scheduled: list[BudgetNotification] = []

    def schedule(self, notification: BudgetNotification) -> None:
        self.scheduled.append(notification)
        logger.info(
            "[NOTIFY] (%s) %s: %s",
            notification.priority,
            notification.title,
            notification.body,
        )
