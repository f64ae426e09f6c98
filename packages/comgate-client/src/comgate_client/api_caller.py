# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Optional

from .config import GatewayConfig
from .conversion import DATA_CONVERSION_TABLE, FieldMappingTable
from .decoder import ResponseDecoder
from .normalizer import normalize
from .payload import WirePayload
from .result import Result
from .spans import record_result, start_client_span
from .transport import KNOWN_CONNECTION_ERRORS, HttpTransport

logger = logging.getLogger(__name__)


class ApiCaller:
    """Runs one payload through transport, decoder and normalizer.

    Transport faults come back as a connection-error ``Result``; incomplete
    payloads (``MissingFieldsError``) and undecodable bodies (``DecodingError``)
    are raised.
    """

    def __init__(self, config: GatewayConfig, transport: Optional[HttpTransport] = None):
        self.config = config
        self.transport = transport or HttpTransport(timeout_s=config.timeout_s, proxy=config.proxy)

    def call(
        self,
        path: str,
        payload: WirePayload,
        *,
        test_call: bool = False,
        table: FieldMappingTable = DATA_CONVERSION_TABLE,
    ) -> Result:
        payload.require_complete()
        fields = dict(payload.fields)
        if test_call:
            fields["test"] = "true"
        url = self.config.url_for(path)

        with start_client_span(f"comgate.{path}", {"url.full": url}) as span:
            logger.debug(f"[COMGATE] POST {url} payload={WirePayload(fields).masked()}")
            try:
                raw = self.transport.send(url, fields)
            except KNOWN_CONNECTION_ERRORS as e:
                logger.warning(f"[COMGATE] {type(e).__name__} calling {url}: {e}")
                result = Result.connection_failure(e, url)
                record_result(span, http_code=result.http_code, outcome=result.outcome.value, redirect=False)
                return result

            decoder = ResponseDecoder(raw, url)
            result = Result.from_response(
                http_code=raw.status_code,
                normalized=normalize(decoder.body, table),
                redirect_to=decoder.redirect_to,
            )
            record_result(span, http_code=result.http_code, outcome=result.outcome.value, redirect=result.is_redirect)

        if result.errors:
            logger.info(f"[COMGATE] {path} failed: {result.to_dict()['errors']}")
        else:
            logger.debug(f"[COMGATE] {path} -> {result.http_code} redirect_to={result.redirect_to}")
        return result

    def close(self) -> None:
        self.transport.close()
