"""Repository for alert operations."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import asc, desc, update

from ..models import Alert
from .base import BaseRepository

SORTABLE_FIELDS = {"created_at", "updated_at", "sent_at", "severity", "status", "title"}


class AlertRepository(BaseRepository):
    """Repository for alert operations."""

    def create_alert(self, **fields) -> Alert:
        return self._persist(Alert(**fields))

    def get_alert(self, alert_id: int) -> Optional[Alert]:
        return self.session.get(Alert, alert_id)

    def list_alerts(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[Alert]:
        """List alerts filtered by status and ordered by a whitelisted column."""
        query = self.session.query(Alert)
        if status:
            query = query.filter(Alert.status == status)

        column = getattr(Alert, sort_by if sort_by in SORTABLE_FIELDS else "created_at")
        order = asc if sort_order == "asc" else desc
        query = query.order_by(order(column), order(Alert.id))

        if limit:
            query = query.limit(limit)
        return query.all()

    def claim_for_dispatch(self, alert_id: int) -> bool:
        """
        Mark a pending alert as being dispatched.

        A single conditional UPDATE, so of several concurrent callers only
        one gets True.
        """
        result = self.session.execute(
            update(Alert)
            .where(
                Alert.id == alert_id,
                Alert.status == "pending",
                Alert.dispatch_started_at.is_(None),
            )
            .values(dispatch_started_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount == 1

    def save(self, alert: Alert) -> Alert:
        return self._persist(alert)

    def delete_alert(self, alert: Alert) -> None:
        self.session.delete(alert)
        self.session.commit()
