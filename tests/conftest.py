# File: tests/conftest.py
from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from aiohttp import web

from web_parser.config import ParserSettings
from web_parser.engine import Engine


@pytest.fixture()
def settings() -> ParserSettings:
    """
    Settings suitable for local test servers: no retries, short timeout.
    """
    return ParserSettings(timeout=2.0, retry_times=0, user_agent="TestAgent/1.0")


@pytest.fixture()
def engine(settings) -> Engine:
    return Engine(settings)


@pytest_asyncio.fixture
async def serve(
    unused_tcp_port_factory,
) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """
    Start throw-away aiohttp applications; yields a coroutine that returns
    the base URL of each started app. Everything is cleaned up afterwards.
    """
    runners: list[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        port = unused_tcp_port_factory()
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    try:
        yield _serve
    finally:
        for runner in reversed(runners):
            await runner.cleanup()
