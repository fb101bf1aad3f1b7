from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol
from aiohttp import ClientSession, ClientTimeout
import aiohttp


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str


class Transport(Protocol):
    """
    Issues one GET. Returns the response for any HTTP status and raises on
    transport-level errors (DNS, connection reset, timeout, decoding).
    """
    async def get(self, url: str, *, headers: Mapping[str, str], timeout: float) -> HttpResponse:
        ...


class AiohttpTransport:
    """
    Transport backed by a shared aiohttp ClientSession.
    The session holds only the connection pool, never crawl state, so one
    instance can serve every domain of a run.
    """
    def __init__(self, session: Optional[ClientSession] = None) -> None:
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AiohttpTransport":
        if self._session is None:
            self._session = create_session()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def get(self, url: str, *, headers: Mapping[str, str], timeout: float) -> HttpResponse:
        if self._session is None:
            self._session = create_session()
        async with self._session.get(url, headers=dict(headers), timeout=ClientTimeout(total=timeout)) as resp:
            body = await resp.text(errors="replace")
            return HttpResponse(status=resp.status, body=body)


def create_session() -> ClientSession:
    """
    Create a shared aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    connector = aiohttp.TCPConnector(limit=0)  # unlimited; concurrency managed by the orchestrator
    return aiohttp.ClientSession(connector=connector)
