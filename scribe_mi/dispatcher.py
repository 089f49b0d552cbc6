"""Request dispatch: the single path every API call takes.

Each call checks the session, renews it at most once if its credentials have
lapsed, sends the request and validates the response. Non-200 responses are
normalized into ApiError or UnknownApiError.
"""

import asyncio
from functools import lru_cache
from typing import Any, Mapping, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from scribe_mi.exceptions import ApiError, NotAuthenticatedError, UnknownApiError
from scribe_mi.logging import get_client_logger
from scribe_mi.schema import ErrorResponse
from scribe_mi.session import SessionManager

logger = get_client_logger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=64)
def _adapter(output_schema: Any) -> TypeAdapter[Any]:
    return TypeAdapter(output_schema)


class RequestDispatcher:
    """Sends authenticated requests to https://{api_url}{path}.

    Renewal is single-flight: concurrent callers that find the credentials
    expired wait for one reauthentication instead of each starting their own.
    """

    def __init__(self, session: SessionManager, base_url: str, http: httpx.AsyncClient):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.http = http
        self._renewal_lock = asyncio.Lock()

    async def ensure_fresh(self) -> None:
        """Raise if unauthenticated; reauthenticate once if expired."""
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()
        if not self.session.store.is_expired():
            return
        async with self._renewal_lock:
            if self.session.store.is_expired():
                logger.info("Session credentials expired, reauthenticating")
                await self.session.reauthenticate()

    async def call_endpoint(
        self,
        path: str,
        output_schema: type[T] | Any,
        *,
        method: str = "GET",
        params: Mapping[str, str] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> T:
        """Call an API endpoint and validate its JSON body.

        Args:
            path: URL path including the leading slash, without host.
            output_schema: Type the 200 body is validated against.
            method: HTTP method.
            params: Query parameters.
            json: JSON request body.
            headers: Extra request headers.

        Raises:
            NotAuthenticatedError: No session was established.
            pydantic.ValidationError: The 200 body does not match output_schema.
            ApiError: Non-200 response with an {errorType, errorMessage} body.
            UnknownApiError: Non-200 response with any other body.
        """
        await self.ensure_fresh()

        logger.debug(f"{method} {path}")
        response = await self.http.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            headers=headers,
            auth=self.session.auth,
        )

        if response.status_code == 200:
            return _adapter(output_schema).validate_json(response.content)

        try:
            error = ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            logger.warning(f"{method} {path} failed with status {response.status_code}")
            raise UnknownApiError(response.status_code) from None

        logger.warning(f"{method} {path} failed with status {response.status_code}: {error.error_type}")
        raise ApiError(response.status_code, error.error_message)
