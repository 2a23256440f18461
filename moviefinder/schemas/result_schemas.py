from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    NO_INTERNET = 'NO_INTERNET'
    UNKNOWN = 'UNKNOWN'


ERROR_MESSAGES = {
    ErrorType.NO_INTERNET: 'No internet connection. Check your network and try again.',
    ErrorType.UNKNOWN: 'Something went wrong. Please try again.',
}


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal['loading'] = 'loading'


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal['success'] = 'success'
    data: Any


class Error(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal['error'] = 'error'
    error: ErrorType
    message: Optional[str] = None

    @property
    def user_message(self) -> str:
        return ERROR_MESSAGES[self.error]


ResultState = Annotated[
    Union[Loading, Success, Error],
    Field(discriminator='status')
]

ResultUnion = Union[Loading, Success, Error]
