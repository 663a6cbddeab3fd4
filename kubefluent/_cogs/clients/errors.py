"""
K8s API errors.

The underlying client library (now, ``aiohttp``) can be replaced in the future.
We cannot rely on embedding its exceptions all over the code in the library.
Hence, we have our own hierarchy of exceptions for K8s API errors.

Low-level errors, such as the network connectivity issues, SSL/HTTPS issues,
etc, are escalated from the client library as is, since they are related not
to the domain of K8s API, but rather to the networking and encryption.

The original errors of the client library are chained as the causes of our own
specialised errors -- for better explainability of errors in the stack traces.

Every failed response is delivered to the caller as is: the HTTP status,
the HTTP reason phrase, and the response's body (parsed if it is JSON).
Some selected statuses are made into their own classes, so that they could be
intercepted in other places (e.g. 404 in the idempotent deletion).
All other statuses are raised as the base error class and are indistinguishable
from each other except via the exception's fields.
"""
import collections.abc
import json
from typing import Any, Collection, Optional, Type

import aiohttp
from typing_extensions import Literal, TypedDict


class RawStatusCause(TypedDict):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#status-v1-meta
class RawStatus(TypedDict):
    apiVersion: str
    kind: Literal["Status"]
    code: int
    status: Literal["Success", "Failure"]
    reason: str
    message: str
    details: RawStatusDetails


class APIError(Exception):

    def __init__(
            self,
            data: Any,
            *,
            status: int,
            status_text: Optional[str] = None,
    ) -> None:
        super().__init__(self._get_message(data) or status_text, data)
        self._status = status
        self._status_text = status_text
        self._data = data

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(status={self._status!r}, status_text={self._status_text!r})'

    @property
    def status(self) -> int:
        return self._status

    @property
    def status_text(self) -> Optional[str]:
        return self._status_text

    @property
    def data(self) -> Any:
        return self._data

    @property
    def code(self) -> Optional[int]:
        return self._get_status_field('code')

    @property
    def message(self) -> Optional[str]:
        return self._get_message(self._data)

    @property
    def details(self) -> Optional[RawStatusDetails]:
        return self._get_status_field('details')

    def _get_status_field(self, name: str) -> Any:
        return self._data.get(name) if isinstance(self._data, collections.abc.Mapping) else None

    @staticmethod
    def _get_message(data: Any) -> Optional[str]:
        return data.get('message') if isinstance(data, collections.abc.Mapping) else None


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIConflictError(APIError):
    pass


def error_class(status: int) -> Type[APIError]:
    return (
        APIUnauthorizedError if status == 401 else
        APIForbiddenError if status == 403 else
        APINotFoundError if status == 404 else
        APIConflictError if status == 409 else
        APIError
    )


async def read_body(
        response: aiohttp.ClientResponse,
) -> Any:
    """
    Read the response's body: as JSON if declared so, otherwise as text.
    """
    if 'application/json' in (response.content_type or ''):
        return await response.json()
    else:
        return await response.text()


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for specialised K8s errors, and raise with extended information.
    """
    if response.status >= 400:

        # Read the response's body before it is closed by raise_for_status().
        data: Any
        try:
            data = await read_body(response)
        except (json.JSONDecodeError, UnicodeDecodeError, aiohttp.ClientPayloadError):
            data = None

        cls = error_class(response.status)

        # Raise the library-specific error while keeping the original error in scope.
        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(data, status=response.status, status_text=response.reason) from e


async def parse_response(
        response: aiohttp.ClientResponse,
) -> Any:
    """
    Check the response for errors, and either raise or return the parsed data.

    A successful response with an unparseable body is a failure too: the data
    are unusable for the caller. The real HTTP status is preserved, though,
    so that "the server sent garbage" can be told apart from the network errors.
    """
    await check_response(response)
    try:
        return await read_body(response)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise APIError(None, status=response.status, status_text=str(e)) from e
