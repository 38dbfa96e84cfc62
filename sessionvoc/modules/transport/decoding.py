"""Result type and the JSON decoding helper shared by every operation."""

import json
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import ParseError, SessionVOCError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one client operation: either a value or an error."""

    value: Optional[T] = None
    error: Optional[SessionVOCError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: SessionVOCError) -> "Result[T]":
        return cls(error=error)

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Apply fn to a successful value; failures pass through untouched."""
        if not self.ok:
            return Result.failure(self.error)
        return Result.success(fn(self.value))

    def then(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        if not self.ok:
            return Result.failure(self.error)
        return fn(self.value)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


def decode_json(body: str) -> Result[Any]:
    """Parse body as JSON, reporting a malformed body as a ParseError result."""
    try:
        return Result.success(json.loads(body))
    except (json.JSONDecodeError, TypeError) as e:
        return Result.failure(ParseError(body, e))


def decode_json_or_text(body: str) -> Any:
    """Parse body as JSON when possible, otherwise hand back the raw text."""
    result = decode_json(body)
    return result.value if result.ok else body
