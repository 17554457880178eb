"""Alert lifecycle orchestration."""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ...config.logging import get_logger, log_audit_event
from ...config.settings import Settings, get_settings
from ...events import (
    AlertAcknowledgedEvent,
    AlertCancelledEvent,
    EventBus,
    NewAlertEvent,
    get_event_bus,
    role_topic,
    user_topic,
)
from ...exceptions import AlertStateError, NotFoundError, ValidationException
from ...ormdb.models import Alert, AlertAcknowledgment
from ...ormdb.repositories import AlertRepository, UserRepository
from .acknowledgments import AcknowledgmentTracker
from .channel_config import ChannelSettings
from .dispatcher import Dispatcher
from .models import (
    AcknowledgmentResult,
    AlertStatus,
    Channel,
    DispatchReport,
    OutgoingAlert,
    Recipient,
    Severity,
    Targeting,
)
from .recipients import RecipientResolver
from .stats import final_status, reduce_attempts, summarize_alerts

logger = get_logger(__name__)

MAX_TITLE_LENGTH = 100
EDITABLE_FIELDS = ("title", "message", "severity", "channels", "targeting")


def parse_severity(value: Any) -> Severity:
    try:
        return Severity(value)
    except ValueError:
        raise ValidationException(
            "Invalid severity",
            field_errors={
                "severity": f"must be one of {[s.value for s in Severity]}",
            },
        )


def parse_channels(values: Optional[Iterable[Any]]) -> List[Channel]:
    """Validate and de-duplicate a channel list, keeping order."""
    channels: List[Channel] = []
    for value in values or []:
        try:
            channel = Channel(value)
        except ValueError:
            raise ValidationException(
                "Invalid channel",
                field_errors={"channels": f"unknown channel '{value}'"},
            )
        if channel not in channels:
            channels.append(channel)

    if not channels:
        raise ValidationException(
            "At least one channel is required",
            field_errors={"channels": "must not be empty"},
        )
    return channels


def parse_targeting(value: Any) -> Targeting:
    targeting = value if isinstance(value, Targeting) else Targeting.from_dict(value)
    if not targeting.is_satisfiable:
        raise ValidationException(
            "Targeting selects nobody",
            field_errors={"targeting": "set all, roles or specific"},
        )
    return targeting


def validate_text(title: Any, message: Any) -> None:
    field_errors = {}
    if not title or not str(title).strip():
        field_errors["title"] = "must not be empty"
    elif len(title) > MAX_TITLE_LENGTH:
        field_errors["title"] = f"must be at most {MAX_TITLE_LENGTH} characters"
    if not message or not str(message).strip():
        field_errors["message"] = "must not be empty"

    if field_errors:
        raise ValidationException("Invalid alert content", field_errors=field_errors)


class AlertService:
    """Creates, dispatches, cancels and tracks acknowledgments for alerts."""

    def __init__(
        self,
        session: Session,
        dispatcher: Optional[Dispatcher] = None,
        event_bus: Optional[EventBus] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.alerts = AlertRepository(session)
        self.users = UserRepository(session)
        self.tracker = AcknowledgmentTracker(session)
        self.resolver = RecipientResolver()
        self.dispatcher = dispatcher or Dispatcher.from_channel_settings(
            ChannelSettings.from_settings(self.settings)
        )
        self.event_bus = event_bus or get_event_bus()
        self.logger = logger.bind(service="alert_service")

    async def create_alert(
        self,
        title: str,
        message: str,
        created_by: int,
        severity: Any = Severity.MEDIUM.value,
        channels: Optional[Iterable[Any]] = None,
        targeting: Any = None,
        send: bool = True,
    ) -> Tuple[Alert, Optional[DispatchReport]]:
        """
        Create an alert and, by default, dispatch it right away.

        Delivery failures never fail creation; they show up in the alert's
        delivery stats and final status.

        Returns:
            The stored alert and the dispatch report (None when send=False)

        Raises:
            ValidationException: Bad content, severity, channels or targeting
            NotFoundError: Unknown creator or explicitly targeted user
        """
        validate_text(title, message)
        severity_value = parse_severity(severity)
        channel_list = parse_channels(channels if channels is not None else ["email"])
        targeting_value = parse_targeting(targeting)

        if self.users.get_user(created_by) is None:
            raise NotFoundError("User", created_by)
        self._check_specific_users(targeting_value)

        alert = self.alerts.create_alert(
            title=title.strip(),
            message=message,
            severity=severity_value.value,
            channels=[c.value for c in channel_list],
            targeting=targeting_value.to_dict(),
            created_by=created_by,
            status=AlertStatus.PENDING.value,
        )

        log_audit_event(
            "alert_created",
            user_id=created_by,
            alert_id=alert.id,
            severity=alert.severity,
            channels=alert.channels,
        )

        if not send:
            return alert, None

        report = await self.send_alert(alert.id)
        return self.alerts.get_alert(alert.id), report

    async def send_alert(self, alert_id: int) -> DispatchReport:
        """
        Dispatch a pending alert and record its delivery outcome.

        Raises:
            NotFoundError: Unknown alert
            AlertStateError: Alert is not pending
        """
        alert = self.get_alert(alert_id)
        if alert.status != AlertStatus.PENDING.value:
            raise AlertStateError(alert_id, alert.status, "sent")

        recipients = self._resolve(alert)
        if not self.alerts.claim_for_dispatch(alert_id):
            raise AlertStateError(
                alert_id,
                alert.status,
                "sent",
                reason=f"Alert {alert_id} is already being dispatched",
            )
        attempts = await self.dispatcher.dispatch(OutgoingAlert.from_record(alert), recipients)

        stats = reduce_attempts(attempts)
        status = final_status(stats)

        # A cancel may have landed while deliveries were in flight
        self.alerts.session.refresh(alert)
        if alert.status == AlertStatus.PENDING.value:
            alert.status = status.value
        else:
            status = AlertStatus(alert.status)

        alert.delivery_stats = stats.to_dict()
        alert.sent_at = datetime.utcnow()
        self.alerts.save(alert)

        report = DispatchReport(
            alert_id=alert.id,
            recipients=recipients,
            attempts=attempts,
            stats=stats,
            status=status,
            completed_at=alert.sent_at,
        )

        log_audit_event(
            "alert_sent",
            user_id=alert.created_by,
            alert_id=alert.id,
            status=status.value,
            recipients=len(recipients),
            simulated=report.simulated_count,
            **stats.to_dict(),
        )

        if status is AlertStatus.SENT and recipients:
            await self.event_bus.publish(
                NewAlertEvent(
                    alert_id=alert.id,
                    status=status.value,
                    topics=[user_topic(r.id) for r in recipients],
                    payload=self._alert_payload(alert),
                )
            )

        return report

    def get_alert(self, alert_id: int) -> Alert:
        alert = self.alerts.get_alert(alert_id)
        if alert is None:
            raise NotFoundError("Alert", alert_id)
        return alert

    def list_alerts(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[Alert]:
        if status is not None:
            try:
                AlertStatus(status)
            except ValueError:
                raise ValidationException(
                    "Invalid status filter",
                    field_errors={"status": f"must be one of {[s.value for s in AlertStatus]}"},
                )
        return self.alerts.list_alerts(
            status=status, limit=limit, sort_by=sort_by, sort_order=sort_order
        )

    def update_alert(self, alert_id: int, changes: Dict[str, Any]) -> Alert:
        """Edit content, severity, channels or targeting of a pending alert."""
        alert = self.get_alert(alert_id)
        self.alerts.session.refresh(alert)
        if alert.status != AlertStatus.PENDING.value:
            raise AlertStateError(alert_id, alert.status, "updated")
        if alert.dispatch_started_at is not None:
            raise AlertStateError(
                alert_id,
                alert.status,
                "updated",
                reason=f"Alert {alert_id} is being dispatched",
            )

        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
        if not changes:
            return alert

        validate_text(changes.get("title", alert.title), changes.get("message", alert.message))
        if "title" in changes:
            alert.title = changes["title"].strip()
        if "message" in changes:
            alert.message = changes["message"]
        if "severity" in changes:
            alert.severity = parse_severity(changes["severity"]).value
        if "channels" in changes:
            alert.channels = [c.value for c in parse_channels(changes["channels"])]
        if "targeting" in changes:
            targeting = parse_targeting(changes["targeting"])
            self._check_specific_users(targeting)
            alert.targeting = targeting.to_dict()

        self.alerts.save(alert)
        log_audit_event(
            "alert_updated",
            user_id=alert.created_by,
            alert_id=alert.id,
            fields=sorted(changes),
        )
        return alert

    def delete_alert(self, alert_id: int) -> None:
        alert = self.get_alert(alert_id)
        self.alerts.delete_alert(alert)
        log_audit_event("alert_deleted", alert_id=alert_id)

    async def cancel_alert(self, alert_id: int, cancelled_by: Optional[int] = None) -> Alert:
        """
        Cancel an alert.

        Pending alerts can always be cancelled; sent alerts only within
        ``alert_cancel_window_minutes`` of being sent.

        Raises:
            NotFoundError: Unknown alert
            AlertStateError: Alert is failed, already cancelled or past the window
        """
        alert = self.get_alert(alert_id)

        if alert.status == AlertStatus.SENT.value:
            window = timedelta(minutes=self.settings.alert_cancel_window_minutes)
            if alert.sent_at is None or datetime.utcnow() - alert.sent_at > window:
                raise AlertStateError(
                    alert_id,
                    alert.status,
                    "cancelled",
                    reason=(
                        f"Alert {alert_id} can only be cancelled within "
                        f"{self.settings.alert_cancel_window_minutes} minutes of sending"
                    ),
                )
        elif alert.status != AlertStatus.PENDING.value:
            raise AlertStateError(alert_id, alert.status, "cancelled")

        alert.status = AlertStatus.CANCELLED.value
        self.alerts.save(alert)

        log_audit_event("alert_cancelled", user_id=cancelled_by, alert_id=alert_id)

        recipients = self._resolve(alert, strict=False)
        if recipients:
            await self.event_bus.publish(
                AlertCancelledEvent(
                    alert_id=alert.id,
                    cancelled_by=cancelled_by,
                    topics=[user_topic(r.id) for r in recipients],
                    payload={"alertId": alert.id, "cancelledBy": cancelled_by},
                )
            )
        return alert

    async def acknowledge(
        self, alert_id: int, user_id: int, notes: Optional[str] = None
    ) -> AcknowledgmentResult:
        """Acknowledge an alert; a repeat returns the original with created=False."""
        result = self.tracker.acknowledge(alert_id, user_id, notes)

        if result.created:
            alert = self.get_alert(alert_id)
            topics = [role_topic(role) for role in self.settings.supervisor_roles]
            topics.append(user_topic(alert.created_by))
            await self.event_bus.publish(
                AlertAcknowledgedEvent(
                    alert_id=alert_id,
                    user_id=user_id,
                    total_acknowledgments=result.total,
                    topics=topics,
                    payload={
                        "alertId": alert_id,
                        "userId": user_id,
                        "acknowledgedAt": result.record.acknowledged_at.isoformat(),
                        "totalAcknowledgments": result.total,
                    },
                )
            )
        return result

    def list_acknowledgments(self, alert_id: int) -> List[AlertAcknowledgment]:
        return self.tracker.list_acknowledgments(alert_id)

    def acknowledgment_stats(self, alert_id: int) -> Dict[str, int]:
        return self.tracker.stats(alert_id)

    def analytics(self) -> Dict[str, Any]:
        return summarize_alerts(self.alerts.list_alerts())

    def _check_specific_users(self, targeting: Targeting) -> None:
        missing = [uid for uid in targeting.specific if self.users.get_user(uid) is None]
        if missing:
            raise NotFoundError("User", ", ".join(str(uid) for uid in missing))

    def _resolve(self, alert: Alert, strict: bool = True) -> List[Recipient]:
        return self.resolver.resolve(
            Targeting.from_dict(alert.targeting), self.users.list_users(), strict=strict
        )

    @staticmethod
    def _alert_payload(alert: Alert) -> Dict[str, Any]:
        return {
            "alertId": alert.id,
            "title": alert.title,
            "message": alert.message,
            "severity": alert.severity,
            "channels": list(alert.channels or []),
            "createdBy": alert.created_by,
            "sentAt": alert.sent_at.isoformat() if alert.sent_at else None,
        }
