"""
Prometheus metrics for ajax dispatch and post-action composition.
"""

import logging

from prometheus_client import Counter

logger = logging.getLogger(__name__)

# Controlled vocabulary for the action label to prevent high cardinality
BUILTIN_ACTION_LABELS = {"togglepanel", "setorderby", "globalsearch"}

ajax_actions_total = Counter(
    "backoffice_ajax_actions_total",
    "Ajax actions dispatched, by action and outcome",
    ["action", "outcome"],
)

composed_responses_total = Counter(
    "backoffice_composed_responses_total",
    "Post-action responses composed, by response mode",
    ["mode"],
)

route_lookup_failures_total = Counter(
    "backoffice_route_lookup_failures_total",
    "Route override lookups that matched no route",
)


def record_ajax_action(action: str, outcome: str) -> None:
    """Count a dispatched ajax action.

    Args:
        action: Built-in action name, or any other identifier
        outcome: One of "success", "noop", "denied", "forwarded", "error"
    """
    if action in BUILTIN_ACTION_LABELS:
        label = action
    elif ":" in action:
        label = "namespaced"
    else:
        label = "unknown"
    ajax_actions_total.labels(action=label, outcome=outcome).inc()


def record_composed_response(mode: str) -> None:
    composed_responses_total.labels(mode=mode).inc()


def record_route_lookup_failure() -> None:
    route_lookup_failures_total.inc()
