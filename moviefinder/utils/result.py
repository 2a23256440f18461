from typing import AsyncIterator, Awaitable, Callable, TypeVar

import httpx

from ..logger import logger
from ..schemas.result_schemas import (
    ERROR_MESSAGES,
    Error,
    ErrorType,
    Loading,
    ResultState,
    Success,
)

T = TypeVar('T')


def classify_error(exc: BaseException) -> ErrorType:
    """
    Map a failure raised by a fetch onto the closed error taxonomy.

    Connectivity faults (httpx transport errors, socket level OSErrors)
    are NO_INTERNET, anything else is UNKNOWN.

    :param exc: The exception raised by the fetch.
    :return: The ErrorType the failure belongs to.
    """
    if isinstance(exc, (httpx.TransportError, OSError)):
        return ErrorType.NO_INTERNET
    return ErrorType.UNKNOWN


def describe_error(exc: BaseException) -> str:
    """
    Short description of a failure that is safe to log.

    Exception text is left out: httpx puts the full request URL, query
    string and api_key included, into the text of HTTPStatusError.
    """
    response = getattr(exc, 'response', None)
    if isinstance(exc, httpx.HTTPStatusError) and response is not None:
        return f"{type(exc).__name__} {response.status_code}"
    return type(exc).__name__


async def as_result(
    fetch: Callable[[], Awaitable[T]]
) -> AsyncIterator[ResultState]:
    """
    Run one invocation of a fetch and observe it as result states.

    Yields Loading, then exactly one of Success(payload) or
    Error(classified failure). Cancellation is not a failure and propagates.

    :param fetch: Zero-argument coroutine function producing the payload.
    :return: Async iterator over the states of this invocation.
    """
    yield Loading()
    try:
        payload = await fetch()
    except Exception as exc:
        error = classify_error(exc)
        logger.error(f"as_result: {describe_error(exc)} -> {error.value}")
        state = Error(error=error, message=ERROR_MESSAGES[error])
    else:
        state = Success(data=payload)
    yield state


async def run_result(fetch: Callable[[], Awaitable[T]]) -> ResultState:
    """
    Drain as_result() and return the terminal state.
    """
    state = None
    async for state in as_result(fetch):
        pass
    return state
