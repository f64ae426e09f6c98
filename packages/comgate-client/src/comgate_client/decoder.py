# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import json
import logging
import tempfile
from functools import cached_property
from typing import IO, Any, Dict, List, Optional, Union
from urllib.parse import parse_qsl, urljoin

from .errors import DecodingError
from .transport import RawResponse

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

DecodedBody = Union[Dict[str, Any], List[Dict[str, Any]]]


def _json_body(text: str) -> DecodedBody:
    try:
        parsed = json.loads(text)
    except ValueError as e:
        raise DecodingError(f"invalid JSON body: {e}") from e
    if isinstance(parsed, dict):
        return parsed
    if isinstance(parsed, list) and all(isinstance(item, dict) for item in parsed):
        return parsed
    raise DecodingError(f"JSON body must be an object or a list of objects, got {type(parsed).__name__}")


def _form_body(text: str) -> Dict[str, str]:
    return dict(parse_qsl(text, keep_blank_values=True))


def _zip_body(content: bytes) -> Dict[str, IO[bytes]]:
    # caller owns the file and deletes it
    handle = tempfile.NamedTemporaryFile(mode="w+b", suffix=".zip", delete=False)
    handle.write(content)
    handle.flush()
    handle.seek(0)
    return {"file": handle}


class ResponseDecoder:
    """Decodes one gateway response once and works out where the payer goes next."""

    def __init__(self, response: RawResponse, request_url: str = ""):
        self.response = response
        self.request_url = request_url or response.url

    @property
    def is_redirect_status(self) -> bool:
        return self.response.status_code in REDIRECT_STATUSES

    @cached_property
    def body(self) -> DecodedBody:
        r = self.response
        if not r.content:
            return {}
        ctype = r.content_type
        if "json" in ctype:
            return _json_body(self._text())
        if "form-urlencoded" in ctype:
            return _form_body(self._text())
        if "zip" in ctype:
            return _zip_body(r.content)
        if self.is_redirect_status and r.location:
            logger.debug(f"[COMGATE] ignoring {ctype or 'untyped'} body of {r.status_code} redirect")
            return {}
        raise DecodingError(
            f"unsupported content-type '{ctype or 'missing'}' (HTTP {r.status_code}) from {self.request_url}"
        )

    @cached_property
    def redirect_to(self) -> Optional[str]:
        r = self.response
        if self.is_redirect_status:
            location = (r.location or "").strip()
            if not location:
                return None
            return urljoin(self.request_url, location)
        if r.status_code == 200 and "zip" not in r.content_type:
            body = self.body
            if isinstance(body, dict):
                target = body.get("redirect")
                if isinstance(target, str) and target:
                    return target
        return None

    def _text(self) -> str:
        try:
            return self.response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"body is not valid UTF-8: {e}") from e
