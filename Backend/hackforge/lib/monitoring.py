# hackforge/lib/monitoring.py
from fastapi import FastAPI
from prometheus_client.registry import CollectorRegistry as Registry
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator
from hackforge.core.logging import log

# Create a separate registry
registry = Registry()

code_generations = Counter(
    'hackforge_code_generations_total',
    'Code generation requests by outcome (success or an error code)',
    ['outcome'],
    registry=registry
)

generation_seconds = Histogram(
    'hackforge_generation_seconds',
    'Time spent waiting on the LLM provider',
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, 120),
    registry=registry
)


def record_generation(outcome: str, seconds: float = None):
    """Count one generation attempt and, when it reached the provider, its latency."""
    code_generations.labels(outcome=outcome).inc()
    if seconds is not None:
        generation_seconds.observe(seconds)


def register_monitoring(app: FastAPI):
    """
    Registers Prometheus monitoring on the FastAPI app and exposes /metrics.
    """
    instrumentator = Instrumentator(
        excluded_handlers=["/metrics"],  # Don't monitor the metrics endpoint itself
        registry=registry  # Use our custom registry
    ).instrument(app)

    instrumentator.expose(app, include_in_schema=False, should_gzip=True)

    log("MONITORING", "Prometheus instrumentation registered at /metrics.")
