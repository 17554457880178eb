"""Repository for alert acknowledgment operations."""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..models import AlertAcknowledgment
from .base import BaseRepository


class AcknowledgmentRepository(BaseRepository):
    """Repository for alert acknowledgment operations."""

    def insert_acknowledgment(
        self, alert_id: int, user_id: int, notes: Optional[str] = None
    ) -> Tuple[AlertAcknowledgment, bool]:
        """
        Insert an acknowledgment, relying on the (alert_id, user_id) constraint.

        Returns:
            (record, created); when the pair already exists the stored
            record is returned unchanged with created=False
        """
        acknowledgment = AlertAcknowledgment(alert_id=alert_id, user_id=user_id, notes=notes)
        try:
            return self._persist(acknowledgment), True
        except IntegrityError:
            self.session.rollback()
            existing = self.get_acknowledgment(alert_id, user_id)
            if existing is None:
                # The violation was not the uniqueness constraint
                raise
            return existing, False

    def get_acknowledgment(
        self, alert_id: int, user_id: int
    ) -> Optional[AlertAcknowledgment]:
        return (
            self.session.query(AlertAcknowledgment)
            .filter(
                AlertAcknowledgment.alert_id == alert_id,
                AlertAcknowledgment.user_id == user_id,
            )
            .one_or_none()
        )

    def count_for_alert(self, alert_id: int) -> int:
        """Number of distinct users who acknowledged the alert."""
        return (
            self.session.query(func.count(func.distinct(AlertAcknowledgment.user_id)))
            .filter(AlertAcknowledgment.alert_id == alert_id)
            .scalar()
        )

    def list_for_alert(self, alert_id: int) -> List[AlertAcknowledgment]:
        return (
            self.session.query(AlertAcknowledgment)
            .filter(AlertAcknowledgment.alert_id == alert_id)
            .order_by(AlertAcknowledgment.acknowledged_at, AlertAcknowledgment.id)
            .all()
        )
