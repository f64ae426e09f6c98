# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import hmac
import logging
import os
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import urlencode

from cachetools import TTLCache
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, SecretStr

from comgate_client import ComgateError, Result, mask_secret, process_callback, state_value
from comgate_client.callbacks import parse_callback_body

logger = logging.getLogger(__name__)

CallbackHandler = Callable[[Result], None]


class ReceiverConfig(BaseModel):
    merchant_gateway_id: str = Field(default_factory=lambda: os.getenv("COMGATE_MERCHANT_GATEWAY_ID", ""))
    secret: SecretStr = Field(default_factory=lambda: SecretStr(os.getenv("COMGATE_SECRET", "")))


def get_receiver_cfg() -> ReceiverConfig:
    return ReceiverConfig()


class _SeenPushes:
    """Remembers (transId, status) pairs so gateway retries are acknowledged only once."""

    def __init__(self, ttl: int = 900) -> None:
        self._seen: TTLCache[Tuple[str, str], float] = TTLCache(maxsize=10000, ttl=ttl)
        self._lock = threading.Lock()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._seen

    def mark(self, key: Tuple[str, str]) -> None:
        with self._lock:
            self._seen[key] = datetime.now(timezone.utc).timestamp()

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()


_seen = _SeenPushes(int(os.getenv("COMGATE_CALLBACK_DEDUPE_TTL_S", "900")))
_handler: Optional[CallbackHandler] = None


def set_callback_handler(handler: Optional[CallbackHandler]) -> None:
    """Register the function that receives every accepted, normalized push."""
    global _handler
    _handler = handler


def reset_seen_pushes() -> None:
    _seen.clear()


def _gateway_answer(code: int, message: str, status_code: int = 200) -> PlainTextResponse:
    # the gateway stops retrying a push once it reads code=0
    return PlainTextResponse(urlencode({"code": code, "message": message}), status_code=status_code)


def _credentials_match(params: Dict[str, Any], cfg: ReceiverConfig) -> bool:
    merchant_ok = hmac.compare_digest(str(params.get("merchant", "")), cfg.merchant_gateway_id)
    secret_ok = hmac.compare_digest(str(params.get("secret", "")), cfg.secret.get_secret_value())
    return merchant_ok and secret_ok and bool(cfg.merchant_gateway_id)


router = APIRouter(prefix="/comgate", tags=["comgate-callbacks"])


@router.post("/callback")
async def receive_callback(request: Request, cfg: ReceiverConfig = Depends(get_receiver_cfg)) -> PlainTextResponse:
    try:
        params = parse_callback_body(await request.body())
    except ComgateError as e:
        logger.error(f"[COMGATE] Unreadable push body: {e}")
        return _gateway_answer(1400, str(e), status_code=400)

    trans_id = params.get("transId", "")
    if not _credentials_match(params, cfg):
        logger.warning(
            f"[COMGATE] Rejected push for transId={trans_id or '?'}: "
            f"merchant={params.get('merchant')!r} secret={mask_secret(params.get('secret'))}"
        )
        return _gateway_answer(1400, "invalid merchant or secret", status_code=403)

    try:
        result = process_callback(params)
    except ComgateError as e:
        logger.error(f"[COMGATE] Undecodable push for transId={trans_id}: {e}")
        return _gateway_answer(1400, str(e), status_code=400)

    state = result.hash.get("state") if result.hash else None
    key = (trans_id, state_value(state) or "")
    if key in _seen:
        logger.info(f"[COMGATE] Duplicate push for transId={trans_id} state={key[1]}, acknowledged")
        return _gateway_answer(0, "OK")

    logger.info(f"[COMGATE] Push accepted for transId={trans_id} state={key[1]}")
    if _handler is not None:
        # handlers are synchronous
        await run_in_threadpool(_handler, result)
    _seen.mark(key)
    return _gateway_answer(0, "OK")


@router.get("/health")
async def health(cfg: ReceiverConfig = Depends(get_receiver_cfg)) -> dict:
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "merchant": cfg.merchant_gateway_id,
        "secret_configured": bool(cfg.secret.get_secret_value()),
    }
