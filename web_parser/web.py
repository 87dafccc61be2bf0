# File: web_parser/web.py
"""web_parser.web: HTTP-интерфейс обходчика на aiohttp.

Маршруты:
  GET /parser/test          Проверка готовности
  GET /parser/siteSummary   Обход; параметры urls (повторяемый), webhookUrl,
                            maxLinks, cleanText, delaySeconds
"""
from __future__ import annotations

import json
from typing import Any, Dict

from aiohttp import web
from pydantic import ValidationError

from web_parser.config import CrawlConfig
from web_parser.engine import Engine
from web_parser.logger import logger

__all__ = ["create_app", "run_server", "ENGINE_KEY", "READY_MESSAGE"]

ENGINE_KEY = web.AppKey("engine", Engine)
READY_MESSAGE = "ParserController is ready to parse URLs."

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _bad_request(message: str) -> web.Response:
    return web.json_response({"error": message}, status=400)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _crawl_config(query) -> CrawlConfig:
    fields: Dict[str, Any] = {}
    if query.get("webhookUrl"):
        fields["webhook_url"] = query["webhookUrl"]
    if query.get("maxLinks"):
        fields["max_links_per_seed"] = int(query["maxLinks"])
    if query.get("cleanText"):
        fields["clean_text"] = _parse_bool(query["cleanText"])
    if query.get("delaySeconds"):
        fields["dispatch_delay_seconds"] = int(query["delaySeconds"])
    return CrawlConfig(**fields)


async def handle_test(_: web.Request) -> web.Response:
    return web.Response(text=READY_MESSAGE)


async def handle_site_summary(request: web.Request) -> web.Response:
    urls = [u for u in request.query.getall("urls", []) if u.strip()]
    if not urls:
        return _bad_request("query parameter 'urls' is required")
    try:
        config = _crawl_config(request.query)
    except ValidationError as exc:
        return _bad_request(json.dumps(exc.errors(include_url=False), default=str))
    except ValueError as exc:
        return _bad_request(str(exc))

    engine = request.app[ENGINE_KEY]
    result = await engine.site_summary(urls, config)
    if isinstance(result, str):
        return web.Response(text=result)
    return web.json_response([summary.to_dict() for summary in result])


def create_app(engine: Engine) -> web.Application:
    app = web.Application()
    app[ENGINE_KEY] = engine
    app.router.add_get("/parser/test", handle_test)
    app.router.add_get("/parser/siteSummary", handle_site_summary)
    return app


def run_server(engine: Engine, host: str, port: int) -> None:
    logger.info("Serving on http://%s:%d", host, port)
    web.run_app(create_app(engine), host=host, port=port, print=None)
