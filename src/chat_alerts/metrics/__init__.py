"""Prometheus metrics for chat-alerts.

Counters are registered on the default prometheus_client registry, so any
exporter the host application runs will serve them.

Usage:
    from chat_alerts.metrics import NOTIFICATIONS_SENT

    NOTIFICATIONS_SENT.labels(room="ops").inc()
"""

from chat_alerts.metrics.notifications import NOTIFICATIONS_FAILED, NOTIFICATIONS_SENT

__all__ = [
    "NOTIFICATIONS_SENT",
    "NOTIFICATIONS_FAILED",
]
