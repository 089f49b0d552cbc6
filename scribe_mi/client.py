"""MI API client.

Example:
    >>> from scribe_mi import MIClient, MIFileType, UsernamePassword
    >>>
    >>> async with MIClient() as client:
    ...     await client.authenticate(UsernamePassword(username="me@example.com", password="..."))
    ...     jobid = await client.submit_task(pdf_bytes, MIFileType.PDF, filename="report.pdf")
    ...     task = await client.get_task(jobid)
"""

from types import TracebackType
from typing import Any, Mapping, TypeVar
from urllib.parse import quote

import httpx

from scribe_mi.auth.credentials import CredentialInput, SessionCredentials, Tokens
from scribe_mi.auth.identity import CognitoIdentityProvider, IdentityProvider
from scribe_mi.auth.transport import BearerTransport, SignedTransport, TransportStrategy
from scribe_mi.dispatcher import RequestDispatcher
from scribe_mi.schema import (
    DeleteMIOutput,
    GetListMIsOutput,
    GetMIOutput,
    GetPortfolioFundPerformanceOutput,
    MICollatedModelFundPerformance,
    MIFileType,
    MIModel,
    MITask,
)
from scribe_mi.session import SessionManager
from scribe_mi.settings import Environment, settings
from scribe_mi.transfer import download_model, upload_file

T = TypeVar("T")

_HTTP_TIMEOUT = 60


def default_transport(env: Environment) -> TransportStrategy:
    """SigV4 signing when an identity pool is configured, bearer tokens otherwise."""
    if env.signs_requests:
        return SignedTransport(region=env.region)
    return BearerTransport()


class MIClient:
    """Authenticated client for the MI document-processing API.

    Args:
        env: Environment record. Defaults to the process settings.
        identity: Identity backend. Defaults to Cognito.
        transport: Transport strategy. Defaults to default_transport(env).
        http: HTTP client for API and storage calls. Created and owned by the
            MIClient if omitted.
    """

    def __init__(
        self,
        env: Environment | None = None,
        *,
        identity: IdentityProvider | None = None,
        transport: TransportStrategy | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.env = env or settings
        self.session = SessionManager(
            identity or CognitoIdentityProvider(self.env),
            transport or default_transport(self.env),
        )
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=_HTTP_TIMEOUT)
        self.dispatcher = RequestDispatcher(self.session, self.env.base_url, self.http)

    async def __aenter__(self) -> "MIClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    @property
    def tokens(self) -> Tokens | None:
        credentials = self.session.credentials
        return credentials.tokens if credentials else None

    async def authenticate(self, credential_input: CredentialInput) -> SessionCredentials:
        """Sign in with UsernamePassword or RefreshToken."""
        return await self.session.authenticate(credential_input)

    async def reauthenticate(self) -> SessionCredentials:
        """Renew the session without credentials. Requires a prior authenticate()."""
        return await self.session.reauthenticate()

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
        return await self.dispatcher.call_endpoint(
            path, output_schema, method=method, params=params, json=json, headers=headers
        )

    async def list_tasks(self, company_name: str | None = None) -> list[MITask]:
        """List tasks, with pre-signed model URLs, optionally for one company."""
        params = {"includePresigned": "true"}
        if company_name:
            params["company"] = company_name
        result = await self.call_endpoint("/tasks", GetListMIsOutput, params=params)
        return result.tasks

    async def get_task(self, jobid: str) -> MITask:
        return await self.call_endpoint(f"/tasks/{quote(jobid, safe='')}", GetMIOutput)

    async def fetch_model(self, task: MITask) -> MIModel:
        """Download and verify the model of a finished task."""
        return await download_model(self.http, task)

    async def consolidate_tasks(self, tasks: list[MITask]) -> MICollatedModelFundPerformance:
        """Collate the fund performance models of several tasks into one."""
        params = {"jobids": ";".join(task.jobid for task in tasks)}
        result = await self.call_endpoint("/fund-portfolio", GetPortfolioFundPerformanceOutput, params=params)
        return result.model

    async def submit_task(
        self,
        file: bytes,
        filetype: MIFileType,
        filename: str | None = None,
        companyname: str | None = None,
    ) -> str:
        """Submit a file for processing and return its job id."""
        return await upload_file(
            self.dispatcher,
            self.http,
            file,
            filetype,
            filename=filename,
            companyname=companyname,
        )

    async def delete_task(self, task: MITask) -> MITask:
        return await self.call_endpoint(f"/tasks/{quote(task.jobid, safe='')}", DeleteMIOutput, method="DELETE")
