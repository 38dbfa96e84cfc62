"""
Transport Module - Black Box Interface

Purpose: Run one HTTP request/response cycle per logical operation
Interface: RequestDispatcher.request(), decode_json(), Result
Hidden: httpx client lifecycle, status classification, body encoding

Replaceable with any transport that yields the same Result contract.
"""

from .decoding import Result, decode_json, decode_json_or_text
from .dispatcher import RequestDispatcher
from .errors import (
    ApplicationError,
    ParseError,
    SessionNotFoundError,
    SessionVOCError,
    TransportError,
    classify_not_found,
)

__all__ = [
    "RequestDispatcher",
    "Result",
    "decode_json",
    "decode_json_or_text",
    "SessionVOCError",
    "TransportError",
    "ApplicationError",
    "SessionNotFoundError",
    "ParseError",
    "classify_not_found",
]
