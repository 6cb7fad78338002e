"""Metric definitions for the social interaction layer."""

from __future__ import annotations

from .registry import registry


social_actions_total = registry.counter(
    "social_actions_total",
    "Follow, like, save, comment and message operations by outcome.",
    label_names=("action", "outcome"),
)

conversation_race_recoveries_total = registry.counter(
    "conversation_race_recoveries_total",
    "Conversation inserts that lost a uniqueness race and re-read the winning row.",
)

identity_race_recoveries_total = registry.counter(
    "identity_race_recoveries_total",
    "First-sight user inserts that lost a uniqueness race on the external id.",
)

messages_marked_read_total = registry.counter(
    "messages_marked_read_total",
    "Messages transitioned from unread to read when their recipient opened the conversation.",
)


def record_action(action: str, outcome: str) -> None:
    social_actions_total.inc(action=action, outcome=outcome)
