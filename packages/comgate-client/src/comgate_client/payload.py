# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Builds the flat Comgate form payload out of nested payment data."""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .config import mask_secret
from .conversion import DATA_CONVERSION_TABLE, Coercion, FieldMappingTable, Path
from .errors import MissingFieldsError


class MissingField(NamedTuple):
    key: str
    path: Path

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)

    @property
    def message(self) -> str:
        return f"Missing value for param {' => '.join(self.path)} ({self.key})"


class FieldSet(NamedTuple):
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()


SINGLE_PAYMENT = FieldSet(
    required=("curr", "email", "label", "method", "price", "refId"),
    optional=(
        "account",
        "applePayPayload",
        "country",
        "dynamicExpiration",
        "embedded",
        "expirationTime",
        "lang",
        "name",
        "phone",
    ),
)
RECURRING_PAYMENT = FieldSet(
    required=("curr", "email", "label", "price", "refId", "initRecurringId"),
    optional=("account", "country", "lang", "name", "phone"),
)
CAPTURE_PREAUTH = FieldSet(required=("transId",), optional=("amount",))
REFUND = FieldSet(required=("transId", "amount"), optional=("curr", "refId"))
TRANSACTION_ONLY = FieldSet(required=("transId",))
METHODS = FieldSet(required=(), optional=("lang", "curr", "country"))
TRANSFERS = FieldSet(required=("date",))


@dataclass
class WirePayload:
    fields: Dict[str, Any] = field(default_factory=dict)
    errors: List[MissingField] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def masked(self) -> Dict[str, Any]:
        out = dict(self.fields)
        if "secret" in out:
            out["secret"] = mask_secret(out["secret"])
        return out

    def require_complete(self) -> "WirePayload":
        if self.errors:
            raise MissingFieldsError(self.errors)
        return self


def dig(data: Mapping[str, Any], path: Sequence[str]) -> Any:
    ref: Any = data
    for key in path:
        if not isinstance(ref, Mapping):
            return None
        ref = ref.get(key)
        if ref is None:
            return None
    return ref


def _encode_binary(value: Any) -> str:
    raw = value if isinstance(value, (bytes, bytearray)) else str(value).encode("utf-8")
    return base64.b64encode(bytes(raw)).decode("ascii")


def convert_data_to_params(
    keys: Iterable[str],
    data: Mapping[str, Any],
    *,
    required: bool,
    table: FieldMappingTable = DATA_CONVERSION_TABLE,
) -> Tuple[Dict[str, Any], List[MissingField]]:
    params: Dict[str, Any] = {}
    errors: List[MissingField] = []
    for key in keys:
        entry = table.entry_for(key)
        value = dig(data, entry.path)
        if value is None:
            if required:
                errors.append(MissingField(key, entry.path))
            continue
        if entry.coercion is Coercion.BASE64:
            value = _encode_binary(value)
        params[key] = value
    return params, errors


def build_payload(
    data: Mapping[str, Any],
    *,
    required: Iterable[str] = (),
    optional: Iterable[str] = (),
    merchant_id: str,
    secret: str,
    flags: Optional[Mapping[str, Any]] = None,
    table: FieldMappingTable = DATA_CONVERSION_TABLE,
) -> WirePayload:
    """Produce a fresh wire payload; missing required values are collected, not raised.

    ``flags`` are the static use-case parameters (``prepareOnly``, ``preauth`` ...)
    sent as-is on top of the mapped fields.
    """
    payload = WirePayload(fields={"merchant": merchant_id, "secret": secret})
    if flags:
        payload.fields.update(flags)

    req, req_errors = convert_data_to_params(required, data, required=True, table=table)
    opt, _ = convert_data_to_params(optional, data, required=False, table=table)
    payload.fields.update(req)
    payload.fields.update(opt)
    payload.errors.extend(req_errors)
    return payload
