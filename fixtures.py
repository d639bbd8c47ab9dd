"""
Test Fixtures
Provides reusable fixtures for all tests

ARCHITECTURE NOTE:
- All pytest fixtures are defined HERE (single source of truth)
- Fixtures are imported in conftest.py via "from fixtures import *"
- FakeTransport is a regular class so tests can also build one directly
"""

import pytest
import requests
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple
from api.base_client import TransportResponse
from api.direct_digital_api import DirectDigitalAPI
from models.direct_digital import UserInfo

TEST_HOST = "https://partner.example.com"
TEST_PARTNER_ID = "partner-123"


@dataclass
class SentRequest:
    """One request captured by FakeTransport"""
    method: str
    url: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    form: Optional[List[Tuple[str, str]]] = None

    def param(self, key: str) -> List[str]:
        """All values sent for a query key, in order"""
        return [v for k, v in self.params if k == key]

    def param_keys(self) -> List[str]:
        return [k for k, _ in self.params]


class FakeTransport:
    """
    Transport double that records requests and replays queued responses

    Responses are returned in the order they were queued; once the queue is
    empty every call gets a 200 with an empty JSON object.
    """

    def __init__(self, error: Optional[Exception] = None):
        self.calls: List[SentRequest] = []
        self.responses: List[TransportResponse] = []
        self.error = error

    def queue(self, status_code: int = 200, body: Any = None) -> 'FakeTransport':
        self.responses.append(TransportResponse(status_code=status_code, body=body))
        return self

    def send(self, method, url, params=None, form=None) -> TransportResponse:
        self.calls.append(SentRequest(method, url, list(params or []), form))
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return TransportResponse(status_code=200, body={})

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last(self) -> SentRequest:
        return self.calls[-1]


# ==================== Transport Fixtures ====================

@pytest.fixture
def fake_transport():
    """Recording transport with no queued responses"""
    return FakeTransport()


@pytest.fixture
def failing_transport():
    """Transport that fails at the network level on every call"""
    return FakeTransport(error=requests.exceptions.ConnectionError("connection refused"))


# ==================== API Fixtures ====================

@pytest.fixture
def make_api(fake_transport):
    """
    Factory for DirectDigitalAPI clients bound to the fake transport

    Usage:
        dd = make_api(api_version='0.8')
    """
    def _make(api_version='v1', transport=None, **kwargs):
        return DirectDigitalAPI(
            host=kwargs.pop('host', TEST_HOST),
            api_version=api_version,
            trusted_partner_id=kwargs.pop('trusted_partner_id', TEST_PARTNER_ID),
            transport=transport or fake_transport,
            **kwargs
        )
    return _make


@pytest.fixture
def dd_api(make_api):
    """Client on the default v1 API"""
    return make_api()


@pytest.fixture
def user_info():
    return UserInfo(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        username="ada"
    )
