"""
Tagged success/failure values returned by services and request interceptors.

    result = await book_experience(db, experience_id, user_id, seats)
    if isinstance(result, Err):
        return error_response(result.error)
    booking = result.value

Expected business failures travel as Err(AppError) up to the API boundary
instead of being raised. Exceptions are reserved for genuine faults.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from app.core.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: AppError

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Ok[T], Err]
