"""Centralized metrics module for Prometheus instrumentation.

Usage:
    from backoffice.metrics.dispatch_metrics import record_ajax_action
"""

from backoffice.metrics import dispatch_metrics

__all__ = ["dispatch_metrics"]
