"""Session lifecycle: sign-in, renewal and the request auth derived from them.

State transitions for one session:

    UNINITIALIZED --authenticate()--> AUTHENTICATED
    AUTHENTICATED --reauthenticate()--> AUTHENTICATED (new generation)

A failed renewal leaves the previous generation in the store. The session
stays stale until a later reauthenticate() or authenticate() succeeds.
"""

import httpx

from scribe_mi.auth.credentials import (
    CredentialInput,
    CredentialStore,
    RefreshToken,
    SessionCredentials,
    Tokens,
)
from scribe_mi.auth.identity import AuthChallenge, IdentityProvider
from scribe_mi.auth.transport import TransportStrategy
from scribe_mi.exceptions import NotAuthenticatedError, UnsupportedChallengeError
from scribe_mi.logging import get_client_logger

logger = get_client_logger(__name__)


class SessionManager:
    """Owns the credential store of one client and keeps it populated.

    Args:
        identity: Identity backend used for sign-in and renewal.
        transport: Strategy deciding expiry source and request auth.
        store: Credential store to populate. A new one is created if omitted.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        transport: TransportStrategy,
        store: CredentialStore | None = None,
    ):
        self.identity = identity
        self.transport = transport
        self.store = store or CredentialStore()
        self._auth: httpx.Auth | None = None

    @property
    def credentials(self) -> SessionCredentials | None:
        return self.store.credentials

    @property
    def is_authenticated(self) -> bool:
        return self.store.is_present() and self._auth is not None

    @property
    def auth(self) -> httpx.Auth:
        """Request auth for the current generation."""
        if self._auth is None:
            raise NotAuthenticatedError()
        return self._auth

    async def _request_tokens(self, credential_input: CredentialInput) -> Tokens:
        result = await self.identity.get_tokens(credential_input)
        if isinstance(result, AuthChallenge):
            raise UnsupportedChallengeError(result.name)
        return result

    def _install(self, credentials: SessionCredentials) -> None:
        auth = self.transport.auth(credentials)
        self.store.replace(credentials)
        self._auth = auth

    async def authenticate(self, credential_input: CredentialInput) -> SessionCredentials:
        """Sign in with a username/password pair or a refresh token.

        Raises:
            UnsupportedChallengeError: The identity provider asked for an
                interactive challenge.
        """
        tokens = await self._request_tokens(credential_input)
        credentials = await self.transport.establish(self.identity, tokens)
        self._install(credentials)
        logger.info(f"Authenticated, session valid until {credentials.expiry.isoformat()}")
        return credentials

    async def reauthenticate(self) -> SessionCredentials:
        """Renew the session with the stored refresh token.

        Raises:
            NotAuthenticatedError: authenticate() never succeeded.
            UnsupportedChallengeError: The identity provider asked for an
                interactive challenge.
        """
        previous = self.store.credentials
        if previous is None:
            raise NotAuthenticatedError("Must authenticate before reauthenticating")

        tokens = await self._request_tokens(RefreshToken(refresh_token=previous.tokens.refresh_token))
        credentials = await self.transport.establish(self.identity, tokens, previous)
        self._install(credentials)
        logger.info(f"Reauthenticated, session valid until {credentials.expiry.isoformat()}")
        return credentials
