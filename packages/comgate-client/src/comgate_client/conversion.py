# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Static mapping between Comgate wire keys and nested domain paths.

Each entry says where a flat gateway field lives in the nested payment data
(``price`` <-> ``payment.amount_in_cents``) and how its value is coerced when a
response is normalized. Several wire keys may target the same path.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from .errors import MappingTableError

Path = Tuple[str, ...]


class Coercion(str, Enum):
    NONE = "none"
    INT = "int"
    FEE = "fee"
    BOOL = "bool"
    STATE = "state"
    # outbound only: bytes/str are base64 encoded before sending
    BASE64 = "base64"


class FieldMapping(NamedTuple):
    wire_key: str
    path: Path
    coercion: Coercion = Coercion.NONE

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


class FieldMappingTable:
    def __init__(self, entries: Iterable[FieldMapping]):
        self._entries: Tuple[FieldMapping, ...] = tuple(entries)
        self._by_key: Dict[str, FieldMapping] = {}
        for entry in self._entries:
            _validate_entry(entry)
            if entry.wire_key in self._by_key:
                raise MappingTableError(f"wire key '{entry.wire_key}' mapped more than once")
            self._by_key[entry.wire_key] = entry
        _validate_paths({e.path for e in self._entries})

    def __contains__(self, wire_key: object) -> bool:
        return wire_key in self._by_key

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, wire_key: str) -> Optional[FieldMapping]:
        return self._by_key.get(wire_key)

    def entry_for(self, wire_key: str) -> FieldMapping:
        entry = self._by_key.get(wire_key)
        if entry is None:
            raise MappingTableError(f"comgate key '{wire_key}' is not set up in conversion table")
        return entry

    def path_for(self, wire_key: str) -> Path:
        return self.entry_for(wire_key).path

    def coercion_for(self, wire_key: str) -> Coercion:
        entry = self._by_key.get(wire_key)
        return entry.coercion if entry else Coercion.NONE

    def wire_keys_for(self, path: Iterable[str]) -> List[str]:
        wanted = tuple(path)
        return [e.wire_key for e in self._entries if e.path == wanted]


def _validate_entry(entry: FieldMapping) -> None:
    if not entry.wire_key:
        raise MappingTableError("empty wire key in conversion table")
    if not entry.path or any(not isinstance(seg, str) or not seg for seg in entry.path):
        raise MappingTableError(f"invalid domain path for '{entry.wire_key}': {entry.path!r}")
    if not isinstance(entry.coercion, Coercion):
        raise MappingTableError(f"unknown coercion for '{entry.wire_key}': {entry.coercion!r}")


def _validate_paths(paths: set) -> None:
    # a path can't be both a leaf and a section of another path
    for path in paths:
        for i in range(1, len(path)):
            if path[:i] in paths:
                raise MappingTableError(
                    f"domain path {'.'.join(path[:i])} is both a value and a section of {'.'.join(path)}"
                )


def _m(wire_key: str, dotted: str, coercion: Coercion = Coercion.NONE) -> FieldMapping:
    return FieldMapping(wire_key, tuple(dotted.split(".")), coercion)


DATA_CONVERSION_TABLE = FieldMappingTable(
    [
        # payment request
        _m("curr", "payment.currency"),
        _m("email", "payer.email"),
        _m("label", "payment.label"),
        _m("method", "payment.method"),
        _m("price", "payment.amount_in_cents", Coercion.INT),
        _m("amount", "payment.amount_in_cents", Coercion.INT),
        _m("refId", "payment.reference_id"),
        _m("account", "merchant.target_shop_account"),
        _m("applePayPayload", "payment.apple_pay_payload", Coercion.BASE64),
        _m("country", "options.country_code"),
        _m("dynamicExpiration", "payment.dynamic_expiration", Coercion.BOOL),
        _m("embedded", "options.embedded_iframe", Coercion.BOOL),
        _m("expirationTime", "payment.expiration_time"),
        _m("lang", "options.language_code"),
        _m("name", "payment.product_name"),
        _m("phone", "payer.phone"),
        _m("preauth", "payment.preauthorization", Coercion.BOOL),
        _m("verification", "payment.verification_payment", Coercion.BOOL),
        _m("initRecurring", "payment.init_recurring", Coercion.BOOL),
        _m("initRecurringId", "payment.init_recurring_id"),
        # response / status
        _m("transId", "transaction_id"),
        _m("code", "code", Coercion.INT),
        _m("error", "error", Coercion.INT),
        _m("message", "message"),
        _m("merchant", "merchant.gateway_id"),
        _m("test", "test", Coercion.BOOL),
        _m("status", "state", Coercion.STATE),
        _m("state", "state", Coercion.STATE),
        _m("fee", "payment.fee", Coercion.FEE),
        _m("vs", "payment.variable_symbol", Coercion.INT),
        _m("payerId", "payer.id"),
        _m("payerName", "payer.account_name"),
        _m("payer_name", "payer.account_name"),
        _m("payerAcc", "payer.account_number"),
        _m("payer_acc", "payer.account_number"),
        _m("redirect", "redirect_to"),
        _m("methods", "methods"),
        # transfers
        _m("transferId", "transfer_id"),
        _m("transferDate", "transfer_date"),
        _m("accountCounterparty", "account_counterparty"),
        _m("accountOutgoing", "account_outgoing"),
        _m("variableSymbol", "variable_symbol", Coercion.INT),
        _m("date", "date"),
    ]
)

# Payment method items carry their own `name`/`id`; only the envelope is mapped.
METHODS_TABLE = FieldMappingTable(
    [
        _m("code", "code", Coercion.INT),
        _m("error", "error", Coercion.INT),
        _m("message", "message"),
        _m("methods", "methods"),
        _m("lang", "options.language_code"),
        _m("curr", "payment.currency"),
        _m("country", "options.country_code"),
    ]
)
