"""
Prometheus Metrics for the chat delivery core.

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus ──► Grafana

METRIC TYPES:
    - Gauge: Value goes up/down (e.g., users online right now)
    - Counter: Value only goes up (e.g., messages sent, events dropped)
    - Histogram: Distribution (e.g., send latency for P95)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ONLINE_USERS = Gauge("chat_online_users", "Number of users with a live connection")

PRESENCE_BROADCASTS_TOTAL = Counter(
    "chat_presence_broadcasts_total",
    "Total number of presence snapshots announced",
)

DROPPED_EVENTS_TOTAL = Counter(
    "chat_dropped_events_total",
    "Outbound events dropped because a connection queue was full or closed",
    ["type"],
)

ROUTING_OUTCOMES_TOTAL = Counter(
    "chat_routing_outcomes_total",
    "Message routing attempts by outcome",
    ["outcome"],
)

MESSAGES_SENT_TOTAL = Counter(
    "chat_messages_sent_total",
    "Total number of persisted messages by content kind",
    ["kind"],
)

SEND_DURATION = Histogram(
    "chat_send_duration_seconds",
    "Time spent persisting and routing one message",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class MessageKind:
    """Kind labels for chat_messages_sent_total."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def set_online_users(count: int):
    """Integration point: application/realtime/registry.py"""
    ONLINE_USERS.set(count)


def increment_presence_broadcasts():
    """Integration point: application/realtime/presence.py"""
    PRESENCE_BROADCASTS_TOTAL.inc()


def increment_dropped_event(event_type: str):
    """Integration point: presence broadcaster and message router."""
    DROPPED_EVENTS_TOTAL.labels(type=event_type).inc()


def increment_routing_outcome(outcome: str):
    """Integration point: application/realtime/router.py"""
    ROUTING_OUTCOMES_TOTAL.labels(outcome=outcome).inc()


def increment_messages_sent(kind: str):
    """Integration point: application/commands/messages/send_message.py"""
    MESSAGES_SENT_TOTAL.labels(kind=kind).inc()


def observe_send_duration(duration: float):
    SEND_DURATION.observe(duration)


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Called by: presentation/api/metrics.py

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "set_online_users",
    "increment_presence_broadcasts",
    "increment_dropped_event",
    "increment_routing_outcome",
    "increment_messages_sent",
    "observe_send_duration",
    "get_metrics_content",
    "MessageKind",
]
