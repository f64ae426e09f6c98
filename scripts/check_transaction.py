#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Print the current gateway status of one or more transactions.

Usage: scripts/check_transaction.py AB12-CD34-EF56 [...]
"""

import json
import os
import sys

from dotenv import load_dotenv

sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "packages", "comgate-client", "src"))
load_dotenv()

from comgate_client import Gateway, GatewayConfig  # noqa: E402


def _jsonable(value):
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return getattr(value, "value", value)


def main(trans_ids: list[str]) -> int:
    if not trans_ids:
        print(__doc__)
        return 2

    gateway = Gateway(GatewayConfig())
    failures = 0
    try:
        for trans_id in trans_ids:
            result = gateway.check_transaction(trans_id)
            if result.is_error:
                failures += 1
                print(f"❌ {trans_id}: {json.dumps(result.to_dict()['errors'])}")
                continue
            print(f"✅ {trans_id}:")
            print(json.dumps(_jsonable(result.hash), indent=2, ensure_ascii=False))
    finally:
        gateway.close()
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
