# ABOUTME: Prometheus metrics collection for the Azure TTS streaming client
# ABOUTME: Defines counters, histograms, and gauges for streams, bytes, errors, and request latency
import logging
from threading import Lock
from typing import Any, Dict, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    REGISTRY
)

logger = logging.getLogger(__name__)


class StreamMetrics:
    """
    Prometheus metrics for audio synthesis and streaming.

    Every recording method swallows and logs its own failures so that metrics
    never interfere with audio delivery. Pass a dedicated ``CollectorRegistry``
    to keep instances isolated (tests do this).
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        self.registry = registry

        try:
            self.streams_total = Counter(
                'azure_tts_streams_total',
                'Total number of audio streams by outcome',
                ['outcome'],
                registry=registry
            )

            self.stream_bytes_total = Counter(
                'azure_tts_stream_bytes_total',
                'Total number of audio bytes received from the service',
                registry=registry
            )

            self.stream_chunks_total = Counter(
                'azure_tts_stream_chunks_total',
                'Total number of non-empty audio chunks received',
                registry=registry
            )

            self.errors_total = Counter(
                'azure_tts_errors_total',
                'Total number of errors by type',
                ['error_type', 'operation'],
                registry=registry
            )

            self.active_streams = Gauge(
                'azure_tts_active_streams',
                'Number of audio streams currently open',
                registry=registry
            )

            self.time_to_first_chunk_seconds = Histogram(
                'azure_tts_time_to_first_chunk_seconds',
                'Time from request start to the first audio chunk',
                buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float('inf')),
                registry=registry
            )

            self.request_duration_seconds = Histogram(
                'azure_tts_request_duration_seconds',
                'Duration of service requests in seconds',
                ['operation'],
                buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0, float('inf')),
                registry=registry
            )

            logger.debug("Prometheus metrics initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Prometheus metrics: {e}")
            raise

    def stream_started(self) -> None:
        try:
            self.active_streams.inc()
        except Exception as e:
            logger.error(f"Error incrementing active streams: {e}")

    def stream_finished(self, outcome: str) -> None:
        """Record a stream leaving the active set (outcome: completed, failed, cancelled)"""
        try:
            self.active_streams.dec()
            self.streams_total.labels(outcome=outcome).inc()
        except Exception as e:
            logger.error(f"Error recording stream outcome: {e}")

    def record_chunk(self, size: int) -> None:
        try:
            if size > 0:
                self.stream_chunks_total.inc()
                self.stream_bytes_total.inc(size)
        except Exception as e:
            logger.error(f"Error recording chunk metric: {e}")

    def record_first_chunk(self, seconds: float) -> None:
        try:
            self.time_to_first_chunk_seconds.observe(seconds)
        except Exception as e:
            logger.error(f"Error recording time to first chunk: {e}")

    def record_request_duration(self, operation: str, seconds: float) -> None:
        try:
            self.request_duration_seconds.labels(operation=operation).observe(seconds)
        except Exception as e:
            logger.error(f"Error recording request duration: {e}")

    def record_error(self, error_type: str, operation: str = "unknown") -> None:
        """Record an error occurrence"""
        try:
            self.errors_total.labels(
                error_type=error_type,
                operation=operation
            ).inc()
        except Exception as e:
            logger.error(f"Error recording error metric: {e}")

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Get a summary of current metric values for debugging"""
        try:
            def value(name: str, labels: Optional[Dict[str, str]] = None) -> float:
                return self.registry.get_sample_value(name, labels or {}) or 0.0

            return {
                "active_streams": value('azure_tts_active_streams'),
                "bytes_received": value('azure_tts_stream_bytes_total'),
                "chunks_received": value('azure_tts_stream_chunks_total'),
                "completed_streams": value('azure_tts_streams_total', {"outcome": "completed"}),
                "failed_streams": value('azure_tts_streams_total', {"outcome": "failed"}),
            }
        except Exception as e:
            logger.error(f"Error getting metrics summary: {e}")
            return {"error": str(e)}


_default_metrics: Optional[StreamMetrics] = None
_lock = Lock()


def get_metrics() -> StreamMetrics:
    """Get the shared metrics instance registered on the default registry"""
    global _default_metrics
    if _default_metrics is None:
        with _lock:
            if _default_metrics is None:
                _default_metrics = StreamMetrics()
    return _default_metrics
