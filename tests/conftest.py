from typing import Callable

import pytest
from httpx import AsyncClient

from profile_client.core.interfaces import InMemoryCredentialStore
from profile_client.services.payment_verification import PaymentVerificationFlow
from profile_client.services.profile_gateway import ProfileGateway

from fake_api import TOKEN, FakeBackend, FakeTransport


class RecordingNavigator:
    def __init__(self):
        self.redirects: list[str] = []

    def redirect(self, path: str) -> None:
        self.redirects.append(path)


class RecordingNotifier:
    def __init__(self):
        self.notifications: list[tuple[str, str, str]] = []

    def notify(self, kind: str, title: str, description: str) -> None:
        self.notifications.append((kind, title, description))


class RecordingScheduler:
    def __init__(self):
        self.scheduled: list[tuple[float, Callable[[], None]]] = []

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        self.scheduled.append((delay_seconds, callback))

    def run_all(self) -> None:
        for _, callback in self.scheduled:
            callback()


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
async def async_client(backend: FakeBackend):
    async with AsyncClient(transport=FakeTransport(backend), base_url="http://test") as client:
        yield client


@pytest.fixture()
def gateway(async_client: AsyncClient) -> ProfileGateway:
    return ProfileGateway(async_client)


@pytest.fixture()
def credentials() -> InMemoryCredentialStore:
    return InMemoryCredentialStore({"authToken": TOKEN})


@pytest.fixture()
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture()
def flow(async_client, credentials, navigator, notifier, scheduler) -> PaymentVerificationFlow:
    return PaymentVerificationFlow(async_client, credentials, navigator, notifier, scheduler)
