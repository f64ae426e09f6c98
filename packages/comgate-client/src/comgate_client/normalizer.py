# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Turns decoded flat gateway bodies into nested payment data.

Every wire key is written at its domain path from the mapping table, values are
coerced per mapping entry, ``secret`` is dropped at any depth, and a coded
answer without a message gets one from ``RESPONSE_CODES``.

``code`` and ``error`` are resolved in one order: the first non-zero of
(``code``, ``error``) wins, 0 otherwise. Whenever either key is present the
result carries both, set to the resolved value.

Nulls are never coerced. A blank integer reads as 0, any other blank coerced
value as None. A state outside ``PaymentState`` is kept as its lower-cased string.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .conversion import DATA_CONVERSION_TABLE, Coercion, FieldMappingTable
from .errors import DecodingError
from .response_codes import message_for

logger = logging.getLogger(__name__)

SECRET_KEY = "secret"


class PaymentState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    PAID = "paid"
    CANCELLED = "cancelled"
    AUTHORIZED = "authorized"


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise DecodingError(f"'{key}' expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError as e:
        raise DecodingError(f"'{key}' expected an integer, got {value!r}") from e


def _to_fee(key: str, value: Any) -> Optional[float]:
    if value == "unknown" or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DecodingError(f"'{key}' expected a decimal fee, got {value!r}") from e


def _to_bool(key: str, value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    if not text:
        return None
    raise DecodingError(f"'{key}' expected true/false, got {value!r}")


def _to_state(key: str, value: Any) -> Union[PaymentState, str, None]:
    if isinstance(value, PaymentState):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    try:
        return PaymentState(text)
    except ValueError:
        logger.warning(f"[COMGATE] '{key}' carries unlisted payment state {value!r}, kept as '{text}'")
        return text


def state_value(state: Union[PaymentState, str, None]) -> Optional[str]:
    """Plain string form of a normalized state, listed or not."""
    if isinstance(state, PaymentState):
        return state.value
    return state


_COERCERS = {
    Coercion.INT: _to_int,
    Coercion.FEE: _to_fee,
    Coercion.BOOL: _to_bool,
    Coercion.STATE: _to_state,
}


def coerce(key: str, value: Any, coercion: Coercion) -> Any:
    fn = _COERCERS.get(coercion)
    if fn is None or value is None:
        return value
    return fn(key, value)


def _transform(value: Any, table: FieldMappingTable) -> Any:
    if isinstance(value, Mapping):
        return _transform_mapping(value, table)
    if isinstance(value, (list, tuple)):
        return [_transform(item, table) for item in value]
    return value


def _transform_mapping(params: Mapping[str, Any], table: FieldMappingTable) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, raw in params.items():
        if key == SECRET_KEY:
            continue
        entry = table.get(key)
        if entry is None:
            out[key] = _transform(raw, table)
            continue
        if isinstance(raw, (Mapping, list, tuple)):
            value = _transform(raw, table)
        else:
            value = coerce(key, raw, entry.coercion)
        _put(out, entry.path, value, key)
    return out


def _put(target: Dict[str, Any], path: Sequence[str], value: Any, wire_key: str) -> None:
    level = target
    for segment in path[:-1]:
        nxt = level.get(segment)
        if nxt is None:
            nxt = level[segment] = {}
        elif not isinstance(nxt, dict):
            raise DecodingError(f"cannot place '{wire_key}' under non-object '{segment}'")
        level = nxt
    # later aliases overwrite earlier ones
    level[path[-1]] = value


def resolve_code(body: Mapping[str, Any]) -> Optional[int]:
    """Resolved status code of a normalized object, None when neither key is present."""
    if "code" not in body and "error" not in body:
        return None
    for key in ("code", "error"):
        value = body.get(key)
        if isinstance(value, int) and value != 0:
            return value
    return 0


def _finish(body: Dict[str, Any]) -> Dict[str, Any]:
    code = resolve_code(body)
    if code is None:
        return body
    body["code"] = code
    body["error"] = code
    if not body.get("message"):
        message = message_for(code)
        if message is not None:
            body["message"] = message
    return body


def _is_file_body(body: Any) -> bool:
    return isinstance(body, Mapping) and set(body.keys()) == {"file"} and hasattr(body["file"], "read")


def normalize(body: Any, table: FieldMappingTable = DATA_CONVERSION_TABLE) -> Any:
    """Normalize a decoded body (object or list of objects) without touching the input."""
    if _is_file_body(body):
        return {"file": body["file"]}
    if isinstance(body, Mapping):
        return _finish(_transform_mapping(body, table))
    if isinstance(body, (list, tuple)):
        return [normalize(item, table) for item in body]
    raise DecodingError(f"cannot normalize body of type {type(body).__name__}")
