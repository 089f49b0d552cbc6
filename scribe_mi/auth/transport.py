"""Transport strategies: how a session's credentials reach the wire.

SignedTransport exchanges tokens for federated AWS credentials and signs each
request with SigV4. Its session expiry is the credential expiration.

BearerTransport sends the id token in the Authorization header. Its session
expiry is the token expiry.
"""

from typing import Generator, Protocol
from urllib.parse import quote

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from scribe_mi.auth.credentials import FederatedCredentials, SessionCredentials, Tokens
from scribe_mi.auth.identity import IdentityProvider
from scribe_mi.exceptions import NotAuthenticatedError

_SIGNED_HEADERS = frozenset({"host", "content-type", "content-md5"})
_UNRESERVED = "-_.~"


class TransportStrategy(Protocol):
    """Turns fresh tokens into session credentials and credentials into request auth."""

    async def establish(
        self,
        identity: IdentityProvider,
        tokens: Tokens,
        previous: SessionCredentials | None = None,
    ) -> SessionCredentials:
        """Build the credentials for a new session generation.

        ``previous`` is the generation being renewed, or None on a fresh sign-in.
        """
        ...

    def auth(self, credentials: SessionCredentials) -> httpx.Auth:
        """Request auth bound to one credentials generation."""
        ...


def _canonical_query(url: httpx.URL) -> bytes:
    """Query string percent-encoded the way SigV4 canonicalizes it (space as %20, not +)."""
    return "&".join(
        f"{quote(key, safe=_UNRESERVED)}={quote(value, safe=_UNRESERVED)}"
        for key, value in url.params.multi_items()
    ).encode("ascii")


class AwsSigV4Auth(httpx.Auth):
    """httpx auth flow that signs requests with botocore's SigV4 signer.

    botocore copies the query string of the URL it is given into the canonical
    request verbatim, so the outgoing URL is re-encoded first and the same
    bytes are both signed and sent.
    """

    requires_request_body = True

    def __init__(self, credentials: FederatedCredentials, service: str, region: str):
        self._signer = SigV4Auth(
            Credentials(credentials.access_key_id, credentials.secret_key, credentials.session_token),
            service,
            region,
        )

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if request.url.query:
            request.url = request.url.copy_with(query=_canonical_query(request.url))
        headers = {
            key: value
            for key, value in request.headers.items()
            if key.lower() in _SIGNED_HEADERS or key.lower().startswith("x-amz-")
        }
        aws_request = AWSRequest(
            method=request.method,
            url=str(request.url),
            data=request.content,
            headers=headers,
        )
        self._signer.add_auth(aws_request)
        for key, value in aws_request.headers.items():
            request.headers[key] = value
        yield request


class BearerAuth(httpx.Auth):
    """httpx auth flow that attaches a raw token as the Authorization header."""

    def __init__(self, token: str):
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self._token
        yield request


class SignedTransport:
    """Federated-credential signing for API Gateway (IAM authorizer)."""

    def __init__(self, region: str, service: str = "execute-api"):
        self.region = region
        self.service = service

    async def establish(
        self,
        identity: IdentityProvider,
        tokens: Tokens,
        previous: SessionCredentials | None = None,
    ) -> SessionCredentials:
        if previous is not None and previous.identity_id:
            identity_id = previous.identity_id
        else:
            identity_id = await identity.get_federated_id(tokens.id_token)
        federated = await identity.get_federated_credentials(identity_id, tokens.id_token)
        return SessionCredentials(
            tokens=tokens,
            expiry=federated.expiration,
            identity_id=identity_id,
            federated=federated,
        )

    def auth(self, credentials: SessionCredentials) -> httpx.Auth:
        if credentials.federated is None:
            raise NotAuthenticatedError("Signed transport requires federated credentials")
        return AwsSigV4Auth(credentials.federated, self.service, self.region)


class BearerTransport:
    """Token-only transport for API Gateway (Cognito authorizer)."""

    async def establish(
        self,
        identity: IdentityProvider,
        tokens: Tokens,
        previous: SessionCredentials | None = None,
    ) -> SessionCredentials:
        return SessionCredentials(tokens=tokens, expiry=tokens.expires_at)

    def auth(self, credentials: SessionCredentials) -> httpx.Auth:
        return BearerAuth(credentials.tokens.id_token)
