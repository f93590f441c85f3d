"""커스텀 예외 클래스 모듈.

Custom exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns,
plus data-access errors raised by repositories. Data-access errors are plain
exceptions; the application maps the ones a client can cause to HTTP status
codes in ``app.main``. Storage failures (connection refused, timeouts) are
never wrapped and propagate as SQLAlchemy raised them.

Usage:
    from app.utils.exceptions import NotFoundError, IncorrectResultSizeError
    raise NotFoundError("Member not found")
    raise IncorrectResultSizeError(expected=1, actual=2)
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (member, team) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when request parameters are invalid beyond what FastAPI validation
    catches (e.g. a malformed sort parameter).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


# === 데이터 접근 예외 (Data access errors) ===

class DataAccessError(Exception):
    """데이터 접근 계층 예외의 공통 부모 클래스.

    Root of the errors raised by repositories.
    """


class IncorrectResultSizeError(DataAccessError):
    """단건 조회 결과가 둘 이상일 때 발생하는 예외.

    Raised when a single-result lookup matches more rows than expected.

    Attributes:
        expected: 기대한 결과 수 (Expected result size)
        actual: 실제 결과 수, 알 수 없으면 None (Actual size, None when unknown)
    """

    def __init__(self, expected: int = 1, actual: int | None = None, detail: str | None = None) -> None:
        self.expected: int = expected
        self.actual: int | None = actual
        if detail is None:
            detail = f"Incorrect result size: expected {expected}"
            if actual is not None:
                detail += f", actual {actual}"
        self.detail: str = detail
        super().__init__(detail)


class ConstraintViolationError(DataAccessError):
    """무결성 제약 위반 예외 — 존재하지 않는 팀 참조 등.

    Raised when a flush violates a database constraint, e.g. a member
    pointing at a team id that does not exist.
    """

    def __init__(self, detail: str = "Constraint violation") -> None:
        self.detail: str = detail
        super().__init__(detail)


class InvalidSortPropertyError(DataAccessError):
    """정렬 대상 속성이 엔티티 컬럼이 아닐 때 발생하는 예외.

    Raised when a sort specification names a property the entity does not map.
    """

    def __init__(self, prop: str, entity: str) -> None:
        self.property: str = prop
        self.entity: str = entity
        self.detail: str = f"No property '{prop}' found for type '{entity}'"
        super().__init__(self.detail)


class NoSuchElementError(DataAccessError):
    """빈 OptionalResult에서 값을 꺼내려 할 때 발생하는 예외.

    Raised by ``OptionalResult.get()`` when no value is present.
    """

    def __init__(self, detail: str = "No value present") -> None:
        self.detail: str = detail
        super().__init__(detail)
