"""Result values delivered to request completions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Optional[T]) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[T]:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value


__all__ = ["Result"]
