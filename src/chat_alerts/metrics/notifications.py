"""Notification delivery metrics.

All metrics use the 'chat_alerts_' prefix.
"""

from prometheus_client import Counter

NOTIFICATIONS_SENT = Counter(
    "chat_alerts_notifications_sent_total",
    "Total notifications posted to a chat room",
    ["room"],
)

NOTIFICATIONS_FAILED = Counter(
    "chat_alerts_notifications_failed_total",
    "Total notifications the chat service did not accept",
    ["room"],
)
