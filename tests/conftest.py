"""Shared fixtures: a relay app wired to an in-process fake Paystack."""

import httpx
import pytest
from fastapi.testclient import TestClient

from payrelay.common.config import RelaySettings
from payrelay.services.relay.main import create_app
from payrelay.services.relay.service import PaystackRelayService


class FakePaystack:
    """Records outbound requests and answers each with the configured reply."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reply(200, {"status": True, "message": "ok", "data": {}})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def reply(self, status_code: int, body) -> None:
        self._responder = lambda request: httpx.Response(status_code, json=body)

    def reply_text(self, status_code: int, text: str) -> None:
        self._responder = lambda request: httpx.Response(status_code, text=text)

    def fail(self, exc_type: type[httpx.TransportError], text: str) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc_type(text, request=request)

        self._responder = raise_error

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_settings(**overrides) -> RelaySettings:
    values = {"paystack_secret_key": "sk_test_abc123", "paystack_base_url": "https://paystack.test"}
    values.update(overrides)
    return RelaySettings(_env_file=None, **values)


@pytest.fixture
def paystack():
    return FakePaystack()


@pytest.fixture
def relay_settings():
    return make_settings()


@pytest.fixture
def service(relay_settings, paystack):
    return PaystackRelayService(relay_settings, transport=httpx.MockTransport(paystack))


@pytest.fixture
def client(service):
    return TestClient(create_app(service))
