#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Standalone runner for the Comgate push-notification receiver.

Env:
  - RECEIVER_PORT (default: 8000)
  - RECEIVER_HOST (default: 0.0.0.0)
  - COMGATE_MERCHANT_GATEWAY_ID / COMGATE_SECRET (pushes are checked against these)
  - COMGATE_CALLBACK_DEDUPE_TTL_S (default: 900)
  - LOG_LEVEL (default: INFO)
"""

import logging
import os
import sys

# Add package sources to Python path
repo_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(repo_root, "receiver", "src"))
sys.path.insert(0, os.path.join(repo_root, "packages", "comgate-client", "src"))

# Load .env BEFORE importing the receiver so env vars are available during module init
from dotenv import load_dotenv  # type: ignore
load_dotenv()

from fastapi import FastAPI

from comgate_client import Result, state_value
from comgate_receiver import router, set_callback_handler


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("comgate_receiver")


def log_push(result: Result) -> None:
    body = result.hash or {}
    state = body.get("state")
    logger.info(
        f"transaction {body.get('transaction_id')} is now {state_value(state) or 'unknown'} "
        f"(ref {body.get('payment', {}).get('reference_id')})"
    )


def build_app() -> FastAPI:
    app = FastAPI(
        title="Comgate Callback Receiver",
        description="Accepts Comgate payment-state pushes",
        version="0.1.0",
    )
    app.include_router(router)
    set_callback_handler(log_push)
    logger.info("Callback receiver app initialized")
    return app


app = build_app()


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("RECEIVER_HOST", "0.0.0.0")
    port = int(os.getenv("RECEIVER_PORT", "8000"))
    uvicorn.run("run_callback_receiver:app", host=host, port=port, reload=True, log_level="info")
