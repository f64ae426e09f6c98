# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import ApiError, ConnectionFailure
from .normalizer import resolve_code
from .response_codes import message_for

CONNECTION_ERROR_CODE = 500


class ErrorCause(str, Enum):
    CONNECTION = "connection"
    API = "api"


class Outcome(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    CONNECTION_ERROR = "connection_error"
    API_ERROR = "api_error"


@dataclass(frozen=True)
class StructuredError:
    code: int
    message: str

    @classmethod
    def with_fallback_message(cls, code: int, message: Optional[str]) -> "StructuredError":
        if not message:
            message = message_for(code) or "unknown error"
        return cls(code=code, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class ObjectBody:
    value: Dict[str, Any]


@dataclass(frozen=True)
class ArrayBody:
    items: List[Any]


Body = Union[ObjectBody, ArrayBody]
Errors = Dict[ErrorCause, List[StructuredError]]


def wrap_body(normalized: Any) -> Optional[Body]:
    if normalized is None:
        return None
    if isinstance(normalized, list):
        return ArrayBody(normalized)
    return ObjectBody(normalized)


@dataclass
class Result:
    """Outcome of one gateway call: normalized body, redirect target and errors.

    ``hash`` and ``array`` are views on ``body``; at most one is ever set.
    """

    http_code: Optional[int] = None
    body: Optional[Body] = None
    redirect_to: Optional[str] = None
    errors: Optional[Errors] = None
    _outcome: Outcome = field(default=Outcome.PENDING, repr=False)

    @property
    def hash(self) -> Optional[Dict[str, Any]]:
        return self.body.value if isinstance(self.body, ObjectBody) else None

    @property
    def array(self) -> Optional[List[Any]]:
        return self.body.items if isinstance(self.body, ArrayBody) else None

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def success(self) -> bool:
        return self._outcome is Outcome.SUCCESS

    @property
    def is_redirect(self) -> bool:
        return self.redirect_to is not None

    @property
    def is_error(self) -> bool:
        return bool(self.errors)

    @classmethod
    def connection_failure(cls, error: BaseException, url: str) -> "Result":
        message = f"{type(error).__name__} > {url} - {error}"
        return cls(
            http_code=CONNECTION_ERROR_CODE,
            errors={ErrorCause.CONNECTION: [StructuredError(CONNECTION_ERROR_CODE, message)]},
            _outcome=Outcome.CONNECTION_ERROR,
        )

    @classmethod
    def from_response(
        cls,
        *,
        http_code: int,
        normalized: Any,
        redirect_to: Optional[str] = None,
    ) -> "Result":
        result = cls(http_code=http_code, body=wrap_body(normalized), redirect_to=redirect_to)
        error = None if redirect_to else _api_error_for(http_code, result.hash)
        if error is None:
            result._outcome = Outcome.SUCCESS
        else:
            result.errors = {ErrorCause.API: [error]}
            result._outcome = Outcome.API_ERROR
        return result

    def to_dict(self) -> Dict[str, Any]:
        errors = None
        if self.errors:
            errors = {cause.value: [e.to_dict() for e in errs] for cause, errs in self.errors.items()}
        return {
            "hash": self.hash,
            "array": self.array,
            "redirect_to": self.redirect_to,
            "errors": errors,
        }

    def raise_for_errors(self) -> "Result":
        if not self.errors:
            return self
        if ErrorCause.CONNECTION in self.errors:
            err = self.errors[ErrorCause.CONNECTION][0]
            raise ConnectionFailure(err.message, self)
        err = self.errors[ErrorCause.API][0]
        raise ApiError(f"[Error #{err.code}] {err.message}", self)


def _api_error_for(http_code: int, body: Optional[Dict[str, Any]]) -> Optional[StructuredError]:
    code = resolve_code(body) if body is not None else None
    if code:
        return StructuredError.with_fallback_message(code, body.get("message"))
    if code is None and http_code >= 400:
        message = body.get("message") if body else None
        return StructuredError(http_code, message or f"HTTP {http_code}")
    return None
