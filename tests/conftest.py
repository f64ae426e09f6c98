# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
import os
import sys
from typing import Callable, Dict, Optional

import httpx
import pytest


def _add_sources_to_syspath() -> None:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    for src in (os.path.join(root, "packages", "comgate-client", "src"), os.path.join(root, "receiver", "src")):
        if src not in sys.path:
            sys.path.insert(0, src)


_add_sources_to_syspath()


# Import after adding to syspath
from comgate_client import GatewayConfig, HttpTransport, RawResponse  # noqa: E402

MERCHANT_ID = "some_id_from_comgate"
SECRET = "gx4q8OV3TJt6noJnfhjqJKyX3Z6Ych0y"
BASE_URL = "https://payments.comgate.cz/v1.0"


@pytest.fixture
def test_env(monkeypatch) -> None:
    """Set up test environment variables."""
    monkeypatch.setenv("COMGATE_MERCHANT_GATEWAY_ID", MERCHANT_ID)
    monkeypatch.setenv("COMGATE_SECRET", SECRET)
    monkeypatch.setenv("COMGATE_TEST_CALLS", "1")
    monkeypatch.setenv("COMGATE_BASE_URL", BASE_URL)
    for name in ("COMGATE_PROXY_HOST", "COMGATE_PROXY_PORT", "COMGATE_PROXY_USER", "COMGATE_PROXY_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def gateway_config(test_env) -> GatewayConfig:
    return GatewayConfig()


@pytest.fixture
def minimal_payment_data() -> dict:
    """Smallest payment the create endpoint accepts."""
    return {
        "payer": {"email": "joh@eaxample.com"},
        "payment": {
            "currency": "CZK",
            "amount_in_cents": 100,  # 1 CZK
            "label": "#2023-0123",
            "reference_id": "#2023-0123",
            "method": "ALL",
        },
    }


@pytest.fixture
def maximal_payment_data(minimal_payment_data) -> dict:
    data = {k: dict(v) for k, v in minimal_payment_data.items()}
    data["payer"]["phone"] = "+420777888999"
    data["merchant"] = {"target_shop_account": "12345678/1234"}
    data["payment"].update(
        {
            "apple_pay_payload": b"apple-pay-token",
            "dynamic_expiration": True,
            "expiration_time": "10h",
            "product_name": "Usefull things",
        }
    )
    data["options"] = {"country_code": "DE", "embedded_iframe": False, "language_code": "sk"}
    data["test"] = True
    return data


def form_response(body: str, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> RawResponse:
    h = {"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"}
    h.update(headers or {})
    return RawResponse(status_code=status_code, headers=h, content=body.encode("utf-8"))


def json_response(body: str, status_code: int = 200) -> RawResponse:
    return RawResponse(status_code=status_code, headers={"content-type": "application/json"}, content=body.encode("utf-8"))


@pytest.fixture
def mock_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpTransport]:
    """Build an HttpTransport whose requests are answered by the given handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
        return HttpTransport(client=httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=False))

    return factory
