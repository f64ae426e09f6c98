# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any, Mapping, Union
from urllib.parse import parse_qsl

from .conversion import DATA_CONVERSION_TABLE, FieldMappingTable
from .errors import DecodingError
from .normalizer import normalize
from .result import Result

CallbackParams = Union[Mapping[str, Any], str, bytes]


def parse_callback_body(raw: Union[str, bytes]) -> dict:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"push body is not valid UTF-8: {e}") from e
    return dict(parse_qsl(raw, keep_blank_values=True))


def process_callback(params: CallbackParams, table: FieldMappingTable = DATA_CONVERSION_TABLE) -> Result:
    """Normalize a payment-state push from the gateway. No request is made."""
    flat = parse_callback_body(params) if isinstance(params, (str, bytes)) else dict(params)
    return Result.from_response(http_code=200, normalized=normalize(flat, table))
