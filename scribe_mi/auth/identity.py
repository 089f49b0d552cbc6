"""Identity capability consumed by the session manager.

The session manager only depends on the IdentityProvider protocol. The
Cognito implementation below talks to AWS Cognito user pools (tokens) and
identity pools (federated credentials) through boto3.
"""

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol, runtime_checkable

import boto3
from botocore import UNSIGNED
from botocore.config import Config

from scribe_mi.auth.credentials import (
    CredentialInput,
    FederatedCredentials,
    RefreshToken,
    Tokens,
    UsernamePassword,
    utcnow,
)
from scribe_mi.logging import get_client_logger
from scribe_mi.settings import Environment

logger = get_client_logger(__name__)


@dataclass(frozen=True)
class AuthChallenge:
    """Interactive challenge returned instead of tokens (MFA, new password, ...)."""

    name: str
    session: str | None = None


@runtime_checkable
class IdentityProvider(Protocol):
    """Protocol for identity backends.

    Implementations: CognitoIdentityProvider (production). Tests use mocks.
    """

    async def get_tokens(self, credential_input: CredentialInput) -> Tokens | AuthChallenge:
        """Sign in, returning tokens or the challenge the provider asked for."""
        ...

    async def get_federated_id(self, id_token: str) -> str:
        """Resolve the federated identity id bound to an id token."""
        ...

    async def get_federated_credentials(self, identity_id: str, id_token: str) -> FederatedCredentials:
        """Exchange an id token for short-lived signing credentials."""
        ...


class CognitoIdentityProvider:
    """IdentityProvider backed by Cognito user and identity pools.

    boto3 is synchronous, so every call runs in a worker thread.
    """

    def __init__(
        self,
        env: Environment,
        *,
        idp_client: Any = None,
        identity_client: Any = None,
    ):
        self.env = env
        config = Config(signature_version=UNSIGNED)
        self._idp = idp_client or boto3.client("cognito-idp", region_name=env.region, config=config)
        self._identity = identity_client or boto3.client("cognito-identity", region_name=env.region, config=config)

    @property
    def _logins(self) -> str:
        return f"cognito-idp.{self.env.region}.amazonaws.com/{self.env.user_pool_id}"

    async def get_tokens(self, credential_input: CredentialInput) -> Tokens | AuthChallenge:
        if isinstance(credential_input, UsernamePassword):
            flow = "USER_PASSWORD_AUTH"
            params = {"USERNAME": credential_input.username, "PASSWORD": credential_input.password}
        elif isinstance(credential_input, RefreshToken):
            flow = "REFRESH_TOKEN_AUTH"
            params = {"REFRESH_TOKEN": credential_input.refresh_token}
        else:
            raise TypeError(f"Unsupported credential input: {type(credential_input).__name__}")

        response = await asyncio.to_thread(
            self._idp.initiate_auth,
            AuthFlow=flow,
            AuthParameters=params,
            ClientId=self.env.client_id,
        )

        if challenge := response.get("ChallengeName"):
            logger.warning(f"Identity provider returned challenge {challenge} for {flow}")
            return AuthChallenge(name=challenge, session=response.get("Session"))

        result = response["AuthenticationResult"]
        # Refresh responses omit the refresh token; the input one stays valid.
        refresh_token = result.get("RefreshToken")
        if refresh_token is None and isinstance(credential_input, RefreshToken):
            refresh_token = credential_input.refresh_token
        if refresh_token is None:
            raise ValueError(f"{flow} response did not include a refresh token")

        return Tokens(
            id_token=result["IdToken"],
            access_token=result["AccessToken"],
            refresh_token=refresh_token,
            expires_at=utcnow() + timedelta(seconds=int(result["ExpiresIn"])),
        )

    async def get_federated_id(self, id_token: str) -> str:
        response = await asyncio.to_thread(
            self._identity.get_id,
            IdentityPoolId=self.env.identity_pool_id,
            Logins={self._logins: id_token},
        )
        return response["IdentityId"]

    async def get_federated_credentials(self, identity_id: str, id_token: str) -> FederatedCredentials:
        response = await asyncio.to_thread(
            self._identity.get_credentials_for_identity,
            IdentityId=identity_id,
            Logins={self._logins: id_token},
        )
        credentials = response["Credentials"]
        return FederatedCredentials(
            access_key_id=credentials["AccessKeyId"],
            secret_key=credentials["SecretKey"],
            session_token=credentials["SessionToken"],
            expiration=credentials["Expiration"],
        )
