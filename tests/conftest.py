"""Shared fixtures: a scripted identity provider and a routed mock HTTP API."""

import httpx
import pytest

from scribe_mi.auth import BearerTransport, SignedTransport
from scribe_mi.client import MIClient
from scribe_mi.settings import Environment
from tests.support.helpers import API_HOST, FakeIdentity, MockApi


@pytest.fixture
def env() -> Environment:
    return Environment(
        api_url=API_HOST,
        user_pool_id="eu-west-2_pool",
        client_id="client-id",
        identity_pool_id="eu-west-2:pool",
        region="eu-west-2",
    )


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def mock_api() -> MockApi:
    return MockApi()


@pytest.fixture
async def http(mock_api: MockApi):
    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_api)) as client:
        yield client


@pytest.fixture
def client(env: Environment, identity: FakeIdentity, http: httpx.AsyncClient) -> MIClient:
    """Client using the bearer transport: Authorization carries the id token."""
    return MIClient(env, identity=identity, transport=BearerTransport(), http=http)


@pytest.fixture
def signed_client(env: Environment, identity: FakeIdentity, http: httpx.AsyncClient) -> MIClient:
    return MIClient(env, identity=identity, transport=SignedTransport(region=env.region), http=http)
