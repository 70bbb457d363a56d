from typing import Any, Optional

import httpx

from profile_client.core.config import settings


def create_client(
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url or settings.api_base_url, transport=transport)


def bearer_headers(token: str) -> dict:
    if not token:
        raise ValueError("A non-empty bearer token is required")
    return {"Authorization": f"Bearer {token}"}


def read_json(response: httpx.Response) -> Optional[Any]:
    """Return the parsed body, or None when the body is empty or not JSON."""
    try:
        return response.json()
    except ValueError:
        return None
