"""Authentication: credential values, identity backends and transport strategies."""

from .credentials import (
    CredentialInput,
    CredentialStore,
    FederatedCredentials,
    RefreshToken,
    SessionCredentials,
    Tokens,
    UsernamePassword,
)
from .identity import AuthChallenge, CognitoIdentityProvider, IdentityProvider
from .transport import (
    AwsSigV4Auth,
    BearerAuth,
    BearerTransport,
    SignedTransport,
    TransportStrategy,
)

__all__ = [
    "AuthChallenge",
    "AwsSigV4Auth",
    "BearerAuth",
    "BearerTransport",
    "CognitoIdentityProvider",
    "CredentialInput",
    "CredentialStore",
    "FederatedCredentials",
    "IdentityProvider",
    "RefreshToken",
    "SessionCredentials",
    "SignedTransport",
    "Tokens",
    "TransportStrategy",
    "UsernamePassword",
]
