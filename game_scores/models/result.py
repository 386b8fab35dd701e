from typing import Any, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel
from typing_extensions import TypeAliasType

T = TypeVar('T')

INTERNAL_ERROR = 'Internal error'


class FieldError(BaseModel):
    """An error tied to one field of a request body"""
    field: Optional[str] = None
    message: str
    value: Optional[Any] = None


class Success(BaseModel, Generic[T]):
    status: int = 200
    data: T


class Failure(BaseModel):
    status: int
    message: str
    errors: Optional[List[FieldError]] = None


# Success[T] is plain Success at runtime, so a bare Union alias could not be subscripted
Result = TypeAliasType("Result", Union[Success[T], Failure], type_params=(T,))


def is_success(result: Union[Success, Failure]) -> bool:
    """A result is successful when its status is 2xx. Nothing else is inspected."""
    return 200 <= result.status < 300


def not_found(message: str = 'Not found') -> Failure:
    return Failure(status=404, message=message)


def bad_request(message: str, errors: Optional[List[FieldError]] = None) -> Failure:
    return Failure(status=400, message=message, errors=errors)


def internal_error(errors: Optional[List[FieldError]] = None) -> Failure:
    return Failure(status=500, message=INTERNAL_ERROR, errors=errors)
