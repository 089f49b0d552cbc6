"""Environment configuration for the Scribe MI client.

Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    API_URL: API host, without scheme (e.g. api.example.com)
    USER_POOL_ID: Cognito user pool id
    CLIENT_ID: Cognito app client id
    IDENTITY_POOL_ID: Cognito identity pool id. Leave empty for bearer-token
        deployments that do not sign requests.
    REGION: AWS region of the API and identity pools (default eu-west-2)

Example:
    >>> from scribe_mi.settings import settings
    >>> print(settings.api_url)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(BaseSettings):
    """Validated environment record consumed by MIClient.

    Attributes:
        api_url: Host serving the MI API. Requests go to https://{api_url}{path}.
        user_pool_id: Cognito user pool used for username/password and refresh
            token authentication.
        client_id: Cognito app client id.
        identity_pool_id: Cognito identity pool used to obtain federated AWS
            credentials. Empty selects the bearer transport.
        region: Region used for SigV4 signing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    api_url: str = ""
    user_pool_id: str = ""
    client_id: str = ""
    identity_pool_id: str = ""
    region: str = "eu-west-2"

    @property
    def base_url(self) -> str:
        return f"https://{self.api_url}"

    @property
    def signs_requests(self) -> bool:
        """True when the deployment exchanges tokens for signing credentials."""
        return bool(self.identity_pool_id)


settings = Environment()
"""Default environment, read once at import."""
