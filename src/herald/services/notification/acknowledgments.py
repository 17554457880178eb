"""Acknowledgment tracking for sent alerts."""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ...config.logging import get_logger, log_audit_event
from ...exceptions import AlertStateError, NotFoundError
from ...ormdb.models import AlertAcknowledgment
from ...ormdb.repositories import (
    AcknowledgmentRepository,
    AlertRepository,
    UserRepository,
)
from .models import AcknowledgmentResult, AlertStatus

logger = get_logger(__name__)


class AcknowledgmentTracker:
    """Records at most one acknowledgment per (alert, user)."""

    def __init__(self, session: Session):
        self.alerts = AlertRepository(session)
        self.users = UserRepository(session)
        self.acknowledgments = AcknowledgmentRepository(session)

    def acknowledge(
        self, alert_id: int, user_id: int, notes: Optional[str] = None
    ) -> AcknowledgmentResult:
        """
        Acknowledge an alert on behalf of a user.

        A repeat acknowledgment is not an error: it returns the original
        record with ``created=False``.

        Raises:
            NotFoundError: Unknown alert or user
            AlertStateError: The alert is not in 'sent' status
        """
        alert = self.alerts.get_alert(alert_id)
        if alert is None:
            raise NotFoundError("Alert", alert_id)
        if self.users.get_user(user_id) is None:
            raise NotFoundError("User", user_id)
        if alert.status != AlertStatus.SENT.value:
            raise AlertStateError(alert_id, alert.status, "acknowledged")

        record, created = self.acknowledgments.insert_acknowledgment(alert_id, user_id, notes)
        total = self.acknowledgments.count_for_alert(alert_id)

        if created:
            log_audit_event("alert_acknowledged", user_id=user_id, alert_id=alert_id)
        else:
            logger.info(
                "Duplicate acknowledgment ignored", alert_id=alert_id, user_id=user_id
            )

        return AcknowledgmentResult(created=created, record=record, total=total)

    def stats(self, alert_id: int) -> Dict[str, int]:
        if self.alerts.get_alert(alert_id) is None:
            raise NotFoundError("Alert", alert_id)
        return {"total": self.acknowledgments.count_for_alert(alert_id)}

    def list_acknowledgments(self, alert_id: int) -> List[AlertAcknowledgment]:
        if self.alerts.get_alert(alert_id) is None:
            raise NotFoundError("Alert", alert_id)
        return self.acknowledgments.list_for_alert(alert_id)
