# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Comgate push-notification receiver

Provides a FastAPI router that authenticates gateway pushes, normalizes them and
hands them to a registered handler.

Usage:
    from comgate_receiver import router, set_callback_handler

    app = FastAPI()
    app.include_router(router)
    set_callback_handler(lambda result: ...)
"""

from .routes import (
    ReceiverConfig,
    get_receiver_cfg,
    reset_seen_pushes,
    router,
    set_callback_handler,
)

__version__ = "0.1.0"

__all__ = [
    "router",
    "ReceiverConfig",
    "get_receiver_cfg",
    "set_callback_handler",
    "reset_seen_pushes",
]
