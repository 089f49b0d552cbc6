"""Tests for the session lifecycle."""

import pytest

from scribe_mi.auth import BearerTransport, RefreshToken, SignedTransport, UsernamePassword
from scribe_mi.exceptions import NotAuthenticatedError, UnsupportedChallengeError
from scribe_mi.session import SessionManager
from tests.support.helpers import FakeIdentity

LOGIN = UsernamePassword(username="me@example.com", password="pw")


@pytest.fixture
def session(identity: FakeIdentity) -> SessionManager:
    return SessionManager(identity, SignedTransport(region="eu-west-2"))


class TestAuthenticate:
    """Test establishing a session."""

    async def test_populates_store(self, session: SessionManager, identity: FakeIdentity):
        """Test sign-in stores tokens and federated credentials."""
        assert not session.is_authenticated

        credentials = await session.authenticate(LOGIN)

        assert session.is_authenticated
        assert session.credentials is credentials
        assert credentials.tokens.id_token == "id-1"
        assert credentials.federated is not None
        assert identity.calls[0] == ("get_tokens", LOGIN)

    async def test_with_refresh_token(self, session: SessionManager, identity: FakeIdentity):
        """Test a refresh token alone can start a session."""
        await session.authenticate(LOGIN)
        refresh = session.credentials.tokens.refresh_token

        credentials = await session.authenticate(RefreshToken(refresh_token=refresh))

        assert credentials.tokens.id_token == "id-2"
        assert credentials.tokens.refresh_token == refresh

    async def test_fresh_sign_in_resolves_identity_again(self, session: SessionManager, identity: FakeIdentity):
        """Test each fresh sign-in looks up the federated identity."""
        await session.authenticate(LOGIN)
        await session.authenticate(LOGIN)

        assert identity.count("get_federated_id") == 2

    async def test_challenge_rejected(self, session: SessionManager, identity: FakeIdentity):
        """Test a sign-in challenge fails without touching the store."""
        identity.challenge = "SOFTWARE_TOKEN_MFA"

        with pytest.raises(UnsupportedChallengeError) as exc_info:
            await session.authenticate(LOGIN)

        assert exc_info.value.challenge_name == "SOFTWARE_TOKEN_MFA"
        assert not session.is_authenticated
        assert identity.count("get_federated_credentials") == 0

    def test_auth_before_authenticate(self, session: SessionManager):
        """Test request auth is unavailable before sign-in."""
        with pytest.raises(NotAuthenticatedError):
            _ = session.auth


class TestReauthenticate:
    """Test renewing an existing session."""

    async def test_requires_prior_authenticate(self, session: SessionManager, identity: FakeIdentity):
        """Test renewal without a session fails before any identity call."""
        with pytest.raises(NotAuthenticatedError):
            await session.reauthenticate()
        assert identity.calls == []

    async def test_uses_stored_refresh_token(self, session: SessionManager, identity: FakeIdentity):
        """Test renewal exchanges the stored refresh token and keeps the identity id."""
        first = await session.authenticate(LOGIN)

        renewed = await session.reauthenticate()

        assert identity.calls[-2][0] == "get_tokens"
        assert identity.calls[-2][1] == RefreshToken(refresh_token=first.tokens.refresh_token)
        assert renewed is not first
        assert session.credentials is renewed
        assert renewed.tokens.id_token == "id-2"
        assert renewed.identity_id == first.identity_id

    async def test_replaces_auth(self, session: SessionManager):
        """Test renewal installs request auth for the new credentials."""
        await session.authenticate(LOGIN)
        first_auth = session.auth

        await session.reauthenticate()

        assert session.auth is not first_auth

    async def test_challenge_on_renewal(self, session: SessionManager, identity: FakeIdentity):
        """Test a challenge during renewal keeps the previous credentials."""
        first = await session.authenticate(LOGIN)
        identity.challenge = "NEW_PASSWORD_REQUIRED"

        with pytest.raises(UnsupportedChallengeError):
            await session.reauthenticate()

        assert session.credentials is first

    async def test_failure_leaves_session_stale(self, session: SessionManager, identity: FakeIdentity):
        """Test a failed renewal leaves the old session in place."""
        first = await session.authenticate(LOGIN)
        first_auth = session.auth
        identity.refresh_error = RuntimeError("identity provider unavailable")

        with pytest.raises(RuntimeError, match="unavailable"):
            await session.reauthenticate()

        assert session.is_authenticated
        assert session.credentials is first
        assert session.auth is first_auth

    async def test_bearer_renewal_skips_federation(self, identity: FakeIdentity):
        """Test bearer sessions renew without identity pool calls."""
        session = SessionManager(identity, BearerTransport())
        await session.authenticate(LOGIN)

        renewed = await session.reauthenticate()

        assert renewed.federated is None
        assert renewed.expiry == renewed.tokens.expires_at
        assert identity.count("get_federated_id") == 0
        assert identity.count("get_federated_credentials") == 0
