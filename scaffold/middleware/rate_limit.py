"""限流中间件：超出窗口配额的请求直接返回 429 信封，不进入业务逻辑。"""

from __future__ import annotations

from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from scaffold.core.constants import HTTP_STATUS_TOO_MANY_REQUESTS, RATE_LIMITED_MESSAGE
from scaffold.core.exceptions import render_envelope
from scaffold.core.logger import logger
from scaffold.core.rate_limit import RateLimiter
from scaffold.core.responses import failure


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limiter: Optional[RateLimiter] = None,
        exempt_prefixes: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.exempt_prefixes = tuple(exempt_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.limiter is None or request.url.path.startswith(self.exempt_prefixes):
            return await call_next(request)

        identity = extract_client_ip(request) or "anonymous"
        if not self.limiter.allow(identity):
            logger.warning("Rate limit exceeded for %s on %s", identity, request.url.path)
            return render_envelope(failure(RATE_LIMITED_MESSAGE, HTTP_STATUS_TOO_MANY_REQUESTS))
        return await call_next(request)


def extract_client_ip(request: Request) -> Optional[str]:
    for header in ("x-forwarded-for", "x-real-ip", "x-client-ip"):
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None
