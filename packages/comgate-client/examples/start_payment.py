# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Create a background payment and poll its state."""

import logging
import os

from dotenv import load_dotenv
from comgate_client import ApiError, Gateway, GatewayConfig, setup_otel_from_env, state_value

load_dotenv()
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())


def main():
    config = GatewayConfig()  # COMGATE_* env vars
    setup_otel_from_env(config)
    gateway = Gateway(config)
    payment = {
        "payer": {"email": os.getenv("PAYER_EMAIL", "payer@example.com")},
        "payment": {
            "currency": "CZK",
            "amount_in_cents": 10000,
            "label": "Order #2023-0123",
            "reference_id": "#2023-0123",
            "method": "ALL",
        },
        "test": True,
    }

    try:
        created = gateway.start_transaction(payment).raise_for_errors()
        print(f"✅ Payment {created.hash['transaction_id']} created")
        print(f"   Send the payer to: {created.redirect_to}")

        status = gateway.check_transaction(created.hash["transaction_id"]).raise_for_errors()
        print(f"   Current state: {state_value(status.hash['state'])}")
    except ApiError as e:
        print(f"\n❌ Gateway refused the request: {e}")
        raise
    finally:
        gateway.close()


if __name__ == "__main__":
    main()
