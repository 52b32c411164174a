import inspect
import json
import logging

from aiohttp import web

from .bridge import QuoteBridge
from .db import QuoteStore

logger = logging.getLogger("Inkwell")

BRIDGE_KEY = web.AppKey("bridge", QuoteBridge)

routes = web.RouteTableDef()


def _json_response(obj, status=200):
    return web.Response(
        status=status,
        text=json.dumps(obj, ensure_ascii=False),
        content_type="application/json",
    )


def _bad_request(msg):
    return _json_response({"error": msg}, status=400)


@routes.get("/inkwell/health")
async def health(request):
    store = request.app[BRIDGE_KEY].store
    return _json_response({"ok": True, "db_path": store.db_path, "count": store.count_quotes()})


@routes.get("/inkwell/operations")
async def list_operations(request):
    return _json_response({"items": list(request.app[BRIDGE_KEY].operations)})


@routes.post("/inkwell/invoke/{operation}")
async def invoke(request):
    bridge = request.app[BRIDGE_KEY]
    operation = request.match_info["operation"]
    if operation not in bridge.operations:
        return _json_response({"error": f"未知操作: {operation}"}, status=404)

    payload = {}
    if request.can_read_body:
        try:
            payload = await request.json()
        except Exception:
            return _bad_request("JSON 解析失败")
    if not isinstance(payload, dict):
        return _bad_request("请求体必须是 JSON 对象")
    args = payload.get("args") or []
    if not isinstance(args, list):
        return _bad_request("args 必须是数组")

    handler = bridge.handler(operation)
    try:
        inspect.signature(handler).bind(*args)
    except TypeError:
        return _bad_request(f"{operation} 参数数量不正确")

    logger.debug("invoke %s args=%d", operation, len(args))
    result = bridge.invoke(operation, *args)
    return _json_response(result)


def create_app(store=None, dialogs=None, config=None):
    app = web.Application()
    app[BRIDGE_KEY] = QuoteBridge(store or QuoteStore.get(), dialogs=dialogs, config=config)
    app.add_routes(routes)
    return app
