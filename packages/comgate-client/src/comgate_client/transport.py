# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from .config import ProxySettings

logger = logging.getLogger(__name__)

# Faults below the HTTP layer. Any HTTP status, 4xx/5xx included, is a delivered response.
KNOWN_CONNECTION_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.ProtocolError,
    httpx.ProxyError,
    httpx.UnsupportedProtocol,
)


@dataclass
class RawResponse:
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    url: str = ""

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for k, v in self.headers.items():
            if k.lower() == wanted:
                return v
        return None

    @property
    def content_type(self) -> str:
        return (self.header("content-type") or "").lower()

    @property
    def location(self) -> Optional[str]:
        return self.header("location")

    @classmethod
    def from_httpx(cls, r: httpx.Response, url: str = "") -> "RawResponse":
        return cls(
            status_code=r.status_code,
            headers=dict(r.headers.items()),
            content=r.content,
            url=url,
        )


class HttpTransport:
    """Posts form-encoded payloads over a pooled synchronous httpx client."""

    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        proxy: Optional[ProxySettings] = None,
        client: Optional[httpx.Client] = None,
    ):
        if client is None:
            client = httpx.Client(
                timeout=timeout_s,
                follow_redirects=False,
                proxy=proxy.url() if proxy else None,
            )
        self.http = client

    def send(
        self,
        url: str,
        data: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
    ) -> RawResponse:
        r = self.http.post(url, data=dict(data), headers=dict(headers or {}))
        logger.debug(f"[COMGATE] {url} answered {r.status_code} ({r.headers.get('content-type')})")
        return RawResponse.from_httpx(r, url)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
