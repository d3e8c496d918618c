"""
Operation Result

Discriminated success/failure value returned by application services.
A failure carries exactly one error kind; a success carries the produced value.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a service operation"""
    ok: bool
    value: T | None = None
    error: Any = None

    @classmethod
    def success(cls, value: T = True) -> 'Result[T]':
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Any) -> 'Result[T]':
        if error is None:
            raise ValueError("A failed result must carry an error")
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        """Return the value, or raise if this is a failure"""
        if not self.ok:
            raise ValueError(f"Called unwrap() on a failed result: {self.error}")
        return self.value

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.error!r})"
