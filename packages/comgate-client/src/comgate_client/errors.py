# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .payload import MissingField
    from .result import Result


class ComgateError(Exception):
    pass


class MappingTableError(ComgateError):
    """Raised when the field mapping table is malformed or a wire key is not mapped."""


class MissingFieldsError(ComgateError):
    """Pre-flight failure: required domain values are absent, nothing was sent."""

    def __init__(self, missing: Sequence["MissingField"]):
        self.missing: List["MissingField"] = list(missing)
        super().__init__("; ".join(m.message for m in self.missing) or "missing required fields")


class DecodingError(ComgateError):
    """Gateway answered with a body that cannot be decoded."""


class _ResultError(ComgateError):
    def __init__(self, message: str, result: "Result"):
        super().__init__(message)
        self.result = result


class ApiError(_ResultError):
    pass


class ConnectionFailure(_ResultError):
    pass
