from abc import ABC, abstractmethod
from typing import List, Optional
import structlog

from models import Notification, NotificationKind

logger = structlog.get_logger()


class NotificationService(ABC):
    @abstractmethod
    def notify_approaching_pay_in_limit(self, address: str) -> None:
        """Signal that an account is close to its cumulative pay-in limit."""
        pass

    @abstractmethod
    def notify_funds_low(self, address: str) -> None:
        """Signal that an account balance dropped below the low-funds mark."""
        pass


class LoggingNotificationService(NotificationService):
    """Emits one log event per signal. Delivery is left to whatever consumes the logs."""

    def notify_approaching_pay_in_limit(self, address: str) -> None:
        logger.info(
            "Approaching pay in limit",
            kind=NotificationKind.approaching_pay_in_limit.value,
            address=address
        )

    def notify_funds_low(self, address: str) -> None:
        logger.info(
            "Funds low",
            kind=NotificationKind.funds_low.value,
            address=address
        )


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.sent: List[Notification] = []

    def notify_approaching_pay_in_limit(self, address: str) -> None:
        self.sent.append(Notification(kind=NotificationKind.approaching_pay_in_limit, address=address))

    def notify_funds_low(self, address: str) -> None:
        self.sent.append(Notification(kind=NotificationKind.funds_low, address=address))

    def count(self, kind: Optional[NotificationKind] = None) -> int:
        if kind is None:
            return len(self.sent)
        return sum(1 for n in self.sent if n.kind == kind)

    def clear(self) -> None:
        """Forget recorded notifications (for testing)."""
        self.sent.clear()
