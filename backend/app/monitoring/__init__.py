"""Prometheus-style counters for follows, likes, conversations and messages."""

from .metrics import (
    conversation_race_recoveries_total,
    identity_race_recoveries_total,
    messages_marked_read_total,
    record_action,
    social_actions_total,
)
from .registry import MetricsRegistry, registry

__all__ = [
    "MetricsRegistry",
    "registry",
    "record_action",
    "social_actions_total",
    "conversation_race_recoveries_total",
    "identity_race_recoveries_total",
    "messages_marked_read_total",
]
