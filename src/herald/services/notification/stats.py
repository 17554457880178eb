"""Delivery statistics and alert analytics."""

from collections import Counter
from typing import Any, Dict, Iterable

from .models import AlertStatus, DeliveryAttempt, DeliveryStats


def reduce_attempts(attempts: Iterable[DeliveryAttempt]) -> DeliveryStats:
    """
    Fold settled delivery attempts into alert-level counters.

    Pure and order-independent. Only called after every attempt has
    settled, so ``pending`` is always zero.
    """
    sent = failed = 0
    for attempt in attempts:
        if attempt.success:
            sent += 1
        else:
            failed += 1

    return DeliveryStats(total=sent + failed, sent=sent, failed=failed, pending=0)


def final_status(stats: DeliveryStats) -> AlertStatus:
    """
    Status an alert takes once dispatch completes.

    An alert fails only when there was something to deliver and nothing got
    through; partial failure and zero attempts both count as sent.
    """
    if stats.total > 0 and stats.sent == 0:
        return AlertStatus.FAILED
    return AlertStatus.SENT


def summarize_alerts(alerts: Iterable[Any]) -> Dict[str, Any]:
    """Aggregate counts across stored alerts for the analytics endpoint."""
    status_counts = Counter()
    severity_counts = Counter()
    channel_counts = Counter()
    totals = {"total_attempts": 0, "sent": 0, "failed": 0, "pending": 0}

    for alert in alerts:
        status_counts[alert.status] += 1
        severity_counts[alert.severity] += 1
        channel_counts.update(dict.fromkeys(alert.channels or [], 1))

        stats = DeliveryStats.from_dict(alert.delivery_stats)
        totals["total_attempts"] += stats.total
        totals["sent"] += stats.sent
        totals["failed"] += stats.failed
        totals["pending"] += stats.pending

    success_rate = (
        round(totals["sent"] / totals["total_attempts"] * 100, 2)
        if totals["total_attempts"]
        else 0.0
    )

    return {
        "alert_counts": {
            "total": sum(status_counts.values()),
            **{status.value: status_counts.get(status.value, 0) for status in AlertStatus},
        },
        "delivery_stats": {**totals, "success_rate": success_rate},
        "severity_counts": dict(severity_counts),
        "channel_counts": dict(channel_counts),
    }
