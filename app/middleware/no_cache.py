from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

CONDITIONAL_REQUEST_HEADERS = {b"if-modified-since", b"if-none-match"}
VALIDATOR_HEADERS = ("etag", "last-modified")


class NoCacheMiddleware:
    """
    Defeats HTTP caching for every response under `path_prefix`:
    conditional request headers are dropped before routing, and responses
    get no-store headers with validators removed.
    """

    def __init__(self, app: ASGIApp, path_prefix: str = "/api"):
        self.app = app
        self.path_prefix = path_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or not scope["path"].startswith(self.path_prefix):
            await self.app(scope, receive, send)
            return

        scope = dict(scope)
        scope["headers"] = [
            (name, value)
            for name, value in scope["headers"]
            if name.lower() not in CONDITIONAL_REQUEST_HEADERS
        ]

        async def send_no_cache(message: Message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name in VALIDATOR_HEADERS:
                    if name in headers:
                        del headers[name]
                for name, value in NO_CACHE_HEADERS.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_no_cache)
