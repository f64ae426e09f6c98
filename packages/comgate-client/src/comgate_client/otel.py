# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .config import GatewayConfig


def otel_resource_attributes(config: Optional["GatewayConfig"] = None) -> Dict[str, Any]:
    """Resource attributes that tag every gateway span with the service and merchant."""
    from . import __version__

    attrs: Dict[str, Any] = {
        "service.name": os.getenv("OTEL_SERVICE_NAME", "comgate-client"),
        "service.version": __version__,
    }
    if config is not None:
        attrs["comgate.merchant"] = config.merchant_gateway_id
        attrs["deployment.environment"] = "test" if config.test_calls else "production"
    return attrs


def setup_otel_from_env(config: Optional["GatewayConfig"] = None, use_console: bool = False):
    """Install a tracer provider for gateway calls and return it.

    Env vars:
    - OTEL_EXPORTER_OTLP_ENDPOINT (no OTLP export unless set)
    - OTEL_SERVICE_NAME (default comgate-client)
    - OTEL_CONSOLE_EXPORTER=1 to add console export
    """
    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except Exception as e:  # pragma: no cover - import error path
        raise RuntimeError(
            "OpenTelemetry SDK/exporter not installed. Install extras: pip install comgate-client[otel]"
        ) from e

    provider = TracerProvider(resource=Resource.create(otel_resource_attributes(config)))

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    if use_console or os.getenv("OTEL_CONSOLE_EXPORTER", "0").lower() in {"1", "true", "yes"}:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    return provider
