"""Prometheus metrics for chat turns."""

from prometheus_client import Counter, Histogram

# Chat turn metrics
chat_turn_latency_ms = Histogram(
    "chat_turn_latency_ms",
    "Chat turn latency from request to terminal frame in milliseconds",
    ["outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

chat_turns_total = Counter(
    "chat_turns_total",
    "Total chat turns by outcome",
    ["outcome"],
)

document_replacements_total = Counter(
    "document_replacements_total",
    "Total AI-driven full document replacements",
)


class PrometheusChatMetrics:
    """Prometheus-based chat metrics implementation."""

    def record_turn(self, outcome: str, latency_ms: float) -> None:
        """Record a finished turn and its latency."""
        chat_turns_total.labels(outcome=outcome).inc()
        chat_turn_latency_ms.labels(outcome=outcome).observe(latency_ms)

    def inc_replacement(self) -> None:
        """Increment document replacement counter."""
        document_replacements_total.inc()
