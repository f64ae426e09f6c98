# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Mapping, Optional, Union

from . import payload as fieldsets
from .api_caller import ApiCaller
from .callbacks import CallbackParams, process_callback
from .config import GatewayConfig
from .conversion import DATA_CONVERSION_TABLE, METHODS_TABLE, FieldMappingTable
from .payload import FieldSet, build_payload
from .result import Result
from .transport import HttpTransport

DateLike = Union[dt.date, str]


def _date_param(value: DateLike) -> str:
    if isinstance(value, dt.datetime):
        value = value.date()
    if isinstance(value, dt.date):
        return value.isoformat()
    # validates YYYY-MM-DD
    return dt.date.fromisoformat(value).isoformat()


class Gateway:
    """Use-case level entry points, one per Comgate operation."""

    def __init__(self, config: GatewayConfig, transport: Optional[HttpTransport] = None):
        self.config = config
        self.caller = ApiCaller(config, transport)

    def test_calls_used(self) -> bool:
        return self.config.test_calls

    # payments

    def start_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        """Background payment; the answer carries transId and the redirect URL."""
        return self._create(payment_data, {"prepareOnly": True})

    def start_frontend_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        """Payer-facing payment; the gateway answers with a 302 to the payment page."""
        return self._create(payment_data, {"prepareOnly": False})

    def start_recurring_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        return self._create(payment_data, {"prepareOnly": True, "initRecurring": True})

    def start_verification_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        return self._create(payment_data, {"prepareOnly": True, "verification": True})

    def start_preauthorized_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        return self._create(payment_data, {"prepareOnly": True, "preauth": True})

    def repeat_recurring_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        return self._call("recurring", fieldsets.RECURRING_PAYMENT, payment_data, {"prepareOnly": True})

    def confirm_preauthorized_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        return self._call("capturePreauth", fieldsets.CAPTURE_PREAUTH, payment_data)

    def cancel_preauthorized_transaction(self, transaction_id: str) -> Result:
        return self._call("cancelPreauth", fieldsets.TRANSACTION_ONLY, {"transaction_id": transaction_id})

    def refund_transaction(self, payment_data: Mapping[str, Any]) -> Result:
        return self._call("refund", fieldsets.REFUND, payment_data)

    def cancel_transaction(self, transaction_id: str) -> Result:
        return self._call("cancel", fieldsets.TRANSACTION_ONLY, {"transaction_id": transaction_id})

    def check_transaction(self, transaction_id: str) -> Result:
        return self._call("status", fieldsets.TRANSACTION_ONLY, {"transaction_id": transaction_id})

    # lists and exports

    def allowed_payment_methods(self, params: Optional[Mapping[str, Any]] = None) -> Result:
        return self._call("methods", fieldsets.METHODS, params or {}, {"type": "json"}, table=METHODS_TABLE)

    def transfers_from(self, date: DateLike) -> Result:
        return self._call("transferList", fieldsets.TRANSFERS, {"date": _date_param(date)})

    def download_zipped_csvs_of_transfers(self, date: DateLike) -> Result:
        """The zip lands in a temp file at ``result.hash["file"]``; the caller deletes it."""
        return self._call("csvDownload", fieldsets.TRANSFERS, {"date": _date_param(date)})

    # inbound

    def process_callback(self, params: CallbackParams) -> Result:
        return process_callback(params)

    def close(self) -> None:
        self.caller.close()

    def _create(self, payment_data: Mapping[str, Any], flags: Dict[str, Any]) -> Result:
        return self._call("create", fieldsets.SINGLE_PAYMENT, payment_data, flags)

    def _call(
        self,
        path: str,
        fields: FieldSet,
        data: Mapping[str, Any],
        flags: Optional[Mapping[str, Any]] = None,
        *,
        table: FieldMappingTable = DATA_CONVERSION_TABLE,
    ) -> Result:
        wire = build_payload(
            data,
            required=fields.required,
            optional=fields.optional,
            merchant_id=self.config.merchant_gateway_id,
            secret=self.config.secret.get_secret_value(),
            flags=flags,
            table=table,
        )
        return self.caller.call(path, wire, test_call=self._test_call_for(data), table=table)

    def _test_call_for(self, data: Mapping[str, Any]) -> bool:
        return self.config.test_calls or bool(data.get("test"))
