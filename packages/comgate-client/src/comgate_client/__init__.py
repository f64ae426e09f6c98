# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from .api_caller import ApiCaller
from .callbacks import process_callback
from .config import GatewayConfig, ProxySettings, mask_secret
from .conversion import DATA_CONVERSION_TABLE, METHODS_TABLE, Coercion, FieldMapping, FieldMappingTable
from .decoder import ResponseDecoder
from .errors import (
    ApiError,
    ComgateError,
    ConnectionFailure,
    DecodingError,
    MappingTableError,
    MissingFieldsError,
)
from .gateway import Gateway
from .normalizer import PaymentState, normalize, state_value
from .otel import setup_otel_from_env
from .payload import MissingField, WirePayload, build_payload
from .response_codes import RESPONSE_CODES
from .result import ArrayBody, ErrorCause, ObjectBody, Outcome, Result, StructuredError
from .transport import HttpTransport, RawResponse

__version__ = "0.1.0"

__all__ = [
    "Gateway",
    "GatewayConfig",
    "ProxySettings",
    "mask_secret",
    "ApiCaller",
    "HttpTransport",
    "RawResponse",
    "ResponseDecoder",
    "normalize",
    "process_callback",
    "build_payload",
    "WirePayload",
    "MissingField",
    "FieldMapping",
    "FieldMappingTable",
    "Coercion",
    "DATA_CONVERSION_TABLE",
    "METHODS_TABLE",
    "RESPONSE_CODES",
    "PaymentState",
    "state_value",
    "Result",
    "ObjectBody",
    "ArrayBody",
    "ErrorCause",
    "Outcome",
    "StructuredError",
    "ComgateError",
    "MappingTableError",
    "MissingFieldsError",
    "DecodingError",
    "ApiError",
    "ConnectionFailure",
    "setup_otel_from_env",
]
