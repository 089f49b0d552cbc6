"""Session credential values and the in-memory credential store."""

from datetime import UTC, datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class UsernamePassword(BaseModel):
    """Credential input for a first sign-in."""

    username: str
    password: str = Field(repr=False)

    model_config = ConfigDict(frozen=True)


class RefreshToken(BaseModel):
    """Credential input for signing in with a previously issued refresh token."""

    refresh_token: str = Field(repr=False)

    model_config = ConfigDict(frozen=True)


CredentialInput = UsernamePassword | RefreshToken


class Tokens(BaseModel):
    """Identity-provider token triple and the time the id/access tokens lapse."""

    id_token: str = Field(repr=False)
    access_token: str = Field(repr=False)
    refresh_token: str = Field(repr=False)
    expires_at: AwareDatetime

    model_config = ConfigDict(frozen=True)


class FederatedCredentials(BaseModel):
    """Short-lived AWS credentials exchanged for an id token."""

    access_key_id: str
    secret_key: str = Field(repr=False)
    session_token: str = Field(repr=False)
    expiration: AwareDatetime

    model_config = ConfigDict(frozen=True)


class SessionCredentials(BaseModel):
    """Everything a transport needs for one session generation.

    Instances are never mutated; renewal builds a new one. ``expiry`` is
    chosen by the transport strategy that produced the value.
    """

    tokens: Tokens
    expiry: AwareDatetime
    identity_id: str | None = None
    federated: FederatedCredentials | None = None

    model_config = ConfigDict(frozen=True)


def utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialStore:
    """Holds the current SessionCredentials of one client instance.

    The store only moves from absent to present. Renewal swaps the whole
    value in one assignment.
    """

    def __init__(self) -> None:
        self._credentials: SessionCredentials | None = None

    @property
    def credentials(self) -> SessionCredentials | None:
        return self._credentials

    def is_present(self) -> bool:
        return self._credentials is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """True when absent or when expiry is at or before ``now``."""
        if self._credentials is None:
            return True
        return self._credentials.expiry <= (now or utcnow())

    def replace(self, credentials: SessionCredentials) -> None:
        self._credentials = credentials
