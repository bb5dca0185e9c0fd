from typing import Any, Callable, TypeVar

import requests
from opentelemetry import context, trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from .logger import logger

# OTLP/HTTP receiver of a local OpenTelemetry Collector (or Jaeger, Phoenix, ...)
DEFAULT_OTLP_ENDPOINT = "http://localhost:4318/v1/traces"
SERVICE_NAME = "chunklab"

T = TypeVar("T")

_tracer_initialized = False

def collector_reachable(endpoint: str, timeout: float = 1.0) -> bool:
    """True when anything answers HTTP at the endpoint's host; a 404/405 still counts."""
    base_url = endpoint.split("/v1/")[0]
    try:
        requests.get(base_url, timeout=timeout)
    except requests.RequestException:
        return False
    return True

def init_telemetry(endpoint: str = DEFAULT_OTLP_ENDPOINT, enabled: bool = True) -> bool:
    """
    Export chunking and retrieval spans over OTLP/HTTP to `endpoint`.

    Runs once per process. When no collector answers, tracing stays on the
    no-op provider and chunking carries on unaffected. Returns whether
    spans are being exported.
    """
    global _tracer_initialized
    if _tracer_initialized or not enabled:
        return _tracer_initialized

    if not collector_reachable(endpoint):
        logger.info(f"Telemetry collector not reachable at {endpoint}. Skipping tracing.")
        return False

    try:
        provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)
    except Exception as e:
        logger.debug(f"Failed to initialize telemetry: {e}. Running without tracing.")
        return False

    _tracer_initialized = True
    logger.info(f"Telemetry initialized, exporting to {endpoint}")
    return True

def run_in_context(parent: context.Context, fn: Callable[..., T], *args: Any) -> T:
    """Call `fn` on a worker thread with the submitting thread's trace context attached."""
    token = context.attach(parent)
    try:
        return fn(*args)
    finally:
        context.detach(token)

def get_tracer(name: str = SERVICE_NAME):
    return trace.get_tracer(name)
