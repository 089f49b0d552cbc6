"""Scribe MI - async client for the MI document-processing API.

The client keeps an authenticated session alive, validates every response
against its wire model and verifies file transfers made through pre-signed
storage URLs.

Quick Start:
    >>> from scribe_mi import MIClient, MIFileType, UsernamePassword
    >>>
    >>> async with MIClient() as client:
    ...     await client.authenticate(UsernamePassword(username="me@example.com", password="..."))
    ...     jobid = await client.submit_task(pdf_bytes, MIFileType.PDF)
    ...     tasks = await client.list_tasks()

Environment Variables:
    - API_URL: API host
    - USER_POOL_ID / CLIENT_ID: Cognito user pool and app client
    - IDENTITY_POOL_ID: Cognito identity pool (enables SigV4 signing)
    - REGION: AWS region (default eu-west-2)
"""

from .auth import (
    AuthChallenge,
    BearerTransport,
    CognitoIdentityProvider,
    CredentialStore,
    IdentityProvider,
    RefreshToken,
    SessionCredentials,
    SignedTransport,
    Tokens,
    TransportStrategy,
    UsernamePassword,
)
from .client import MIClient
from .dispatcher import RequestDispatcher
from .exceptions import (
    ApiError,
    IntegrityError,
    ModelNotReadyError,
    ModelShapeMismatchError,
    NotAuthenticatedError,
    ScribeMIError,
    UnknownApiError,
    UnsupportedChallengeError,
    UploadFailedError,
)
from .logging import get_client_logger, setup_logging
from .schema import (
    MIFileType,
    MIModel,
    MIModelFinancials,
    MIModelFundPerformance,
    MITask,
    TaskStatus,
)
from .session import SessionManager
from .settings import Environment, settings

__version__ = "0.1.0"

__all__ = [
    # Config/Settings
    "Environment",
    "settings",
    # Logging
    "get_client_logger",
    "setup_logging",
    # Client
    "MIClient",
    "RequestDispatcher",
    "SessionManager",
    # Auth
    "AuthChallenge",
    "BearerTransport",
    "CognitoIdentityProvider",
    "CredentialStore",
    "IdentityProvider",
    "RefreshToken",
    "SessionCredentials",
    "SignedTransport",
    "Tokens",
    "TransportStrategy",
    "UsernamePassword",
    # Models
    "MIFileType",
    "MIModel",
    "MIModelFinancials",
    "MIModelFundPerformance",
    "MITask",
    "TaskStatus",
    # Errors
    "ScribeMIError",
    "NotAuthenticatedError",
    "UnsupportedChallengeError",
    "ApiError",
    "UnknownApiError",
    "UploadFailedError",
    "ModelNotReadyError",
    "IntegrityError",
    "ModelShapeMismatchError",
]
