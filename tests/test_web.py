# File: tests/test_web.py
import pytest
from aiohttp import ClientSession, web

from web_parser.crawler.models import EXTERNAL_RESOURCE
from web_parser.engine import WEBHOOK_ACK
from web_parser.web import READY_MESSAGE, create_app


def site() -> web.Application:
    app = web.Application()

    async def root(_):
        return web.Response(
            text='<a href="/about">About</a><a href="https://other.test/">X</a>',
            content_type="text/html",
        )

    async def about(_):
        return web.Response(text="<p>About page</p>", content_type="text/html")

    app.router.add_get("/", root)
    app.router.add_get("/about", about)
    return app


@pytest.mark.asyncio()
async def test_ready_probe(engine, serve):
    api = await serve(create_app(engine))
    async with ClientSession() as session:
        async with session.get(f"{api}/parser/test") as resp:
            assert resp.status == 200
            assert await resp.text() == READY_MESSAGE


@pytest.mark.asyncio()
async def test_site_summary_aggregate(engine, serve):
    base = await serve(site())
    api = await serve(create_app(engine))
    params = [("urls", base), ("urls", f"{base}/about"), ("maxLinks", "0"), ("cleanText", "true")]

    async with ClientSession() as session:
        async with session.get(f"{api}/parser/siteSummary", params=params) as resp:
            assert resp.status == 200
            body = await resp.json()

    assert [s["url"] for s in body] == [base, f"{base}/about"]
    # /about is reachable from both seeds but reported once
    all_links = [link for summary in body for link in summary["links"]]
    assert len(all_links) == 3
    links = {link["url"]: link for link in all_links}
    assert links[f"{base}/about"]["data"] == "About page"
    assert links[f"{base}/about"]["wordCount"] == 2
    assert links["https://other.test"]["data"] == EXTERNAL_RESOURCE


@pytest.mark.asyncio()
async def test_site_summary_webhook(engine, serve):
    received = []
    hook_app = web.Application()

    async def hook(request):
        received.append(await request.json())
        return web.Response()

    hook_app.router.add_post("/hook", hook)
    base = await serve(site())
    hook_url = await serve(hook_app)
    api = await serve(create_app(engine))

    async with ClientSession() as session:
        params = {"urls": base, "webhookUrl": f"{hook_url}/hook"}
        async with session.get(f"{api}/parser/siteSummary", params=params) as resp:
            assert resp.status == 200
            assert await resp.text() == WEBHOOK_ACK

    assert len(received) == 3


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "params",
    [
        {},
        {"urls": ""},
        {"urls": "https://example.com", "maxLinks": "many"},
        {"urls": "https://example.com", "maxLinks": "-1"},
        {"urls": "https://example.com", "cleanText": "perhaps"},
        {"urls": "https://example.com", "webhookUrl": "nope"},
        {"urls": "https://example.com", "delaySeconds": "-3"},
    ],
)
async def test_site_summary_bad_request(engine, serve, params):
    api = await serve(create_app(engine))
    async with ClientSession() as session:
        async with session.get(f"{api}/parser/siteSummary", params=params) as resp:
            assert resp.status == 400
            body = await resp.json()
    assert "error" in body
