"""Collaborators the client is wired to by its host application."""

import asyncio
from typing import Callable, Optional, Protocol


class CredentialStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, token: str) -> None: ...


class Navigator(Protocol):
    def redirect(self, path: str) -> None: ...


class Notifier(Protocol):
    def notify(self, kind: str, title: str, description: str) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None: ...


class InMemoryCredentialStore:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._tokens: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._tokens.get(key)

    def set(self, key: str, token: str) -> None:
        self._tokens[key] = token


class LoopScheduler:
    """Runs callbacks on the running event loop after a delay."""

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        asyncio.get_running_loop().call_later(delay_seconds, callback)
