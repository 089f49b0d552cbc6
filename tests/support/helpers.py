"""Test doubles for the identity provider and the HTTP API."""

import asyncio
import json
from datetime import UTC, datetime, timedelta
from typing import Any, Callable

import httpx

from scribe_mi.auth import (
    AuthChallenge,
    FederatedCredentials,
    RefreshToken,
    Tokens,
)

API_HOST = "api.test.example"
API_BASE = f"https://{API_HOST}"
STORAGE_BASE = "https://storage.test.example"

# JSON text whose MD5 is the ETag served with it
FINANCIALS_JSON = '{"company":"EXAMPLE CO LTD","dateReporting":"2024-01-01","covering":"year","items":[]}'
FINANCIALS_ETAG = '"3f627dbbd74547377281ff090bf313eb"'


def make_tokens(expires_in: float = 3600, refresh_token: str = "refresh-token", generation: int = 1) -> Tokens:
    return Tokens(
        id_token=f"id-{generation}",
        access_token=f"access-{generation}",
        refresh_token=refresh_token,
        expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
    )


def task_payload(jobid: str = "job-1", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "jobid": jobid,
        "client": "Scribe",
        "status": "PROCESSING",
        "submitted": 1700000000,
    }
    payload.update(overrides)
    return payload


class FakeIdentity:
    """Scripted IdentityProvider that records every call.

    Each successful get_tokens call starts a new generation, so tokens and
    federated credentials can be told apart by their suffix.
    """

    def __init__(self) -> None:
        self.token_lifetime = 3600.0
        self.credential_lifetime = 3600.0
        self.challenge: str | None = None
        self.refresh_error: Exception | None = None
        self.calls: list[tuple[str, Any]] = []
        self.generation = 0

    async def get_tokens(self, credential_input: Any) -> Tokens | AuthChallenge:
        self.calls.append(("get_tokens", credential_input))
        await asyncio.sleep(0)
        if isinstance(credential_input, RefreshToken) and self.refresh_error is not None:
            raise self.refresh_error
        if self.challenge:
            return AuthChallenge(name=self.challenge, session="challenge-session")
        self.generation += 1
        refresh = credential_input.refresh_token if isinstance(credential_input, RefreshToken) else "refresh-token"
        return make_tokens(self.token_lifetime, refresh_token=refresh, generation=self.generation)

    async def get_federated_id(self, id_token: str) -> str:
        self.calls.append(("get_federated_id", id_token))
        return "eu-west-2:identity-1"

    async def get_federated_credentials(self, identity_id: str, id_token: str) -> FederatedCredentials:
        self.calls.append(("get_federated_credentials", (identity_id, id_token)))
        return FederatedCredentials(
            access_key_id="AKIDEXAMPLE",
            secret_key="secret-key",
            session_token=f"session-{id_token}",
            expiration=datetime.now(UTC) + timedelta(seconds=self.credential_lifetime),
        )

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def refresh_count(self) -> int:
        return sum(1 for call, arg in self.calls if call == "get_tokens" and isinstance(arg, RefreshToken))


def _without_query(url: httpx.URL) -> str:
    return f"{url.scheme}://{url.host}{url.path}"


class MockApi:
    """httpx.MockTransport handler routing (method, url-without-query) to responses."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        status: int = 200,
        *,
        json: Any = None,
        content: bytes | str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json, headers=headers)
            return httpx.Response(status, content=content, headers=headers)

        self.routes[(method, url)] = respond

    def add_handler(self, method: str, url: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, url)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, _without_query(request.url))
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, json={"errorType": "NotFound", "errorMessage": f"No route for {key}"})
        return handler(request)

    def sent(self, method: str, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and _without_query(r.url) == url]


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)
