# ABOUTME: Monitoring package initialization
# ABOUTME: Exports the Prometheus metrics recorder used by the streaming client
from .metrics import StreamMetrics, get_metrics

__all__ = ["StreamMetrics", "get_metrics"]
