# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import os
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, Field, SecretStr, field_validator

DEFAULT_BASE_URL = "https://payments.comgate.cz/v1.0"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def mask_secret(value: Optional[str]) -> str:
    """Partially mask a credential so it can appear in a log line."""
    if not value:
        return ""
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


class ProxySettings(BaseModel):
    host: str
    port: int
    user: Optional[str] = None
    password: Optional[SecretStr] = None

    def url(self) -> str:
        auth = ""
        if self.user:
            auth = quote(self.user, safe="")
            if self.password is not None:
                auth += ":" + quote(self.password.get_secret_value(), safe="")
            auth += "@"
        return f"http://{auth}{self.host}:{self.port}"


def _proxy_from_env() -> Optional[ProxySettings]:
    host = os.getenv("COMGATE_PROXY_HOST")
    if not host:
        return None
    password = os.getenv("COMGATE_PROXY_PASSWORD")
    return ProxySettings(
        host=host,
        port=int(os.getenv("COMGATE_PROXY_PORT", "8080")),
        user=os.getenv("COMGATE_PROXY_USER") or None,
        password=SecretStr(password) if password else None,
    )


class GatewayConfig(BaseModel):
    merchant_gateway_id: str = Field(default_factory=lambda: os.getenv("COMGATE_MERCHANT_GATEWAY_ID", ""))
    secret: SecretStr = Field(default_factory=lambda: SecretStr(os.getenv("COMGATE_SECRET", "")))
    test_calls: bool = Field(default_factory=lambda: _env_flag("COMGATE_TEST_CALLS"))
    base_url: str = Field(default_factory=lambda: os.getenv("COMGATE_BASE_URL", DEFAULT_BASE_URL))
    timeout_s: float = Field(default_factory=lambda: float(os.getenv("COMGATE_TIMEOUT_S", "30")))
    proxy: Optional[ProxySettings] = Field(default_factory=_proxy_from_env)

    @field_validator("merchant_gateway_id")
    @classmethod
    def validate_merchant(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("merchant_gateway_id is required")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @property
    def masked_secret(self) -> str:
        return mask_secret(self.secret.get_secret_value())
