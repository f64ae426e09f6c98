# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any, Dict, Optional

from opentelemetry import trace


def start_client_span(name: str, attributes: Optional[Dict[str, Any]] = None):
    tracer = trace.get_tracer("comgate_client")
    return tracer.start_as_current_span(name, kind=trace.SpanKind.CLIENT, attributes=attributes)


def record_result(span, *, http_code: Optional[int], outcome: str, redirect: bool) -> None:
    if http_code is not None:
        span.set_attribute("http.response.status_code", http_code)
    span.set_attribute("comgate.outcome", outcome)
    span.set_attribute("comgate.redirect", redirect)
