"""단건 조회 결과 래퍼.

Single-result wrapper that separates "not found" from "found" without a
``None`` sentinel in the caller's hands.
"""

from typing import Callable, Generic, TypeVar

from app.utils.exceptions import NoSuchElementError

T = TypeVar("T")
R = TypeVar("R")


class OptionalResult(Generic[T]):
    """값이 있을 수도, 없을 수도 있는 조회 결과.

    A lookup result that either holds a value or is explicitly empty.
    """

    __slots__ = ("_value", "_present")

    def __init__(self, value: T | None, present: bool) -> None:
        self._value = value
        self._present = present

    @classmethod
    def of(cls, value: T) -> "OptionalResult[T]":
        if value is None:
            raise ValueError("OptionalResult.of() requires a value; use of_nullable()")
        return cls(value, True)

    @classmethod
    def of_nullable(cls, value: T | None) -> "OptionalResult[T]":
        return cls(value, value is not None)

    @classmethod
    def empty(cls) -> "OptionalResult[T]":
        return cls(None, False)

    def is_present(self) -> bool:
        return self._present

    def is_empty(self) -> bool:
        return not self._present

    def get(self) -> T:
        if not self._present:
            raise NoSuchElementError()
        return self._value  # type: ignore[return-value]

    def or_else(self, default: T) -> T:
        return self._value if self._present else default  # type: ignore[return-value]

    def map(self, fn: Callable[[T], R]) -> "OptionalResult[R]":
        if not self._present:
            return OptionalResult.empty()
        return OptionalResult.of_nullable(fn(self._value))  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return self._present

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionalResult):
            return NotImplemented
        return self._present == other._present and self._value is other._value

    def __hash__(self) -> int:
        return hash((self._present, id(self._value)))

    def __repr__(self) -> str:
        return f"OptionalResult({self._value!r})" if self._present else "OptionalResult.empty"
