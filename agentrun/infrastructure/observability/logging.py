import structlog
import logging
import sys
import threading
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import os


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    service_name: str = "agentrun-history"
) -> None:
    """Setup structured logging configuration"""

    # Configure Python logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO)
    )

    # Processors for structlog
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_context,
    ]

    # Add appropriate renderer based on format
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=os.getenv("ENVIRONMENT", "development"),
        version=os.getenv("SERVICE_VERSION", "unknown")
    )


def add_service_context(logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add request context to all log entries"""

    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()

    context = structlog.contextvars.get_contextvars()
    for key in ("trace_id", "conversation_id"):
        if context.get(key) and key not in event_dict:
            event_dict[key] = context[key]

    return event_dict


class HistoryLogger:
    """Specialized logger for history reconciliation"""

    def __init__(self, name: str):
        self.logger = structlog.get_logger(name)

    def log_reconciliation(
        self,
        input_messages: int,
        output_messages: int,
        dropped_unpaired: int = 0,
        duration_ms: Optional[float] = None,
        **kwargs
    ):
        """Log one reconciliation pass"""

        self.logger.info(
            "reconciliation",
            input_messages=input_messages,
            output_messages=output_messages,
            dropped_unpaired=dropped_unpaired,
            duration_ms=duration_ms,
            **kwargs
        )

    def log_resume_lookup(
        self,
        scanned_messages: int,
        found: bool,
        duration_ms: Optional[float] = None
    ):
        """Log a resume-info lookup"""

        self.logger.info(
            "resume_lookup",
            scanned_messages=scanned_messages,
            found=found,
            duration_ms=duration_ms
        )


# Global logger instance
history_logger = HistoryLogger("agentrun.history")


class MetricsCollector:
    """Collect metrics and export them as log events"""

    def __init__(self):
        self.metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def record_latency(self, operation: str, duration_ms: float, tags: Optional[Dict[str, str]] = None):
        """Record operation latency"""

        key = f"latency.{operation}"
        with self._lock:
            if key not in self.metrics:
                self.metrics[key] = {
                    "count": 0,
                    "sum": 0.0,
                    "min": float('inf'),
                    "max": 0.0
                }

            entry = self.metrics[key]
            entry["count"] += 1
            entry["sum"] += duration_ms
            entry["min"] = min(entry["min"], duration_ms)
            entry["max"] = max(entry["max"], duration_ms)

        history_logger.logger.debug(
            "metric",
            metric_type="latency",
            operation=operation,
            duration_ms=duration_ms,
            tags=tags or {}
        )

    def increment_counter(self, name: str, value: int = 1, tags: Optional[Dict[str, str]] = None):
        """Increment a counter metric"""

        with self._lock:
            self.metrics[name] = self.metrics.get(name, 0) + value

        history_logger.logger.debug(
            "metric",
            metric_type="counter",
            name=name,
            value=value,
            tags=tags or {}
        )

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Get summary of all metrics"""

        summary = {}
        with self._lock:
            items = [(key, dict(value) if isinstance(value, dict) else value)
                     for key, value in self.metrics.items()]

        for key, value in items:
            if isinstance(value, dict) and "count" in value:
                summary[key] = {
                    "count": value["count"],
                    "avg": value["sum"] / value["count"] if value["count"] > 0 else 0,
                    "min": value["min"] if value["min"] != float('inf') else 0,
                    "max": value["max"]
                }
            else:
                summary[key] = value

        return summary

    def reset(self):
        with self._lock:
            self.metrics.clear()


# Global metrics collector
metrics = MetricsCollector()
